"""
Host package.

Re-exports the host interfaces and the collaborators shipped with the package.
SysfsPciResolver is the PciResolver used on real hosts.
"""

from ib_guid_provisioner.host.base import DeviceBinder, LinkManager, PciResolver
from ib_guid_provisioner.host.mock import InMemoryDeviceBinder, InMemoryLinkManager, StaticPciResolver
from ib_guid_provisioner.host.sysfs import SysfsPciResolver

__all__ = [
    "DeviceBinder",
    "InMemoryDeviceBinder",
    "InMemoryLinkManager",
    "LinkManager",
    "PciResolver",
    "StaticPciResolver",
    "SysfsPciResolver",
]
