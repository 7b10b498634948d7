"""
Provisioner package.

Re-exports the provisioner so callers import it from one stable location.
"""

from ib_guid_provisioner.provisioner.infiniband import InfinibandProvisioner

__all__ = ["InfinibandProvisioner"]
