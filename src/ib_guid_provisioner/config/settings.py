"""
Provisioner settings.

The GUID config lives at a fixed path on the host.
When the provisioner runs inside a container the host filesystem is mounted
under a prefix, so the path actually opened is host_root + config_path.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

DEFAULT_GUID_CONFIG_PATH = "/etc/sriov-operator/infiniband/guids"
DEFAULT_HOST_ROOT = "/host"


def host_extension_path(path: str, host_root: str = DEFAULT_HOST_ROOT) -> Path:
    """Return path as seen through the host mount."""
    if not host_root:
        return Path(path)
    return Path(host_root) / path.lstrip("/")


@dataclass(frozen=True)
class ProvisionerConfig:
    """
    Provisioner configuration.

    config_path
    Host path of the GUID config file.

    host_root
    Mount point of the host filesystem. Empty string means no prefix.
    """

    config_path: str = DEFAULT_GUID_CONFIG_PATH
    host_root: str = DEFAULT_HOST_ROOT

    @property
    def resolved_config_path(self) -> Path:
        return host_extension_path(self.config_path, self.host_root)
