"""
Sysfs backed PCI resolver.

A network interface with a PCI backing device exposes it as a symlink:

  /sys/class/net/<name>/device -> ../../../0000:3b:00.0

The PCI address is the basename of the symlink target.
Virtual interfaces such as bridges or loopback have no device link.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ib_guid_provisioner.core.errors import LinkResolutionError
from ib_guid_provisioner.host.base import PciResolver


@dataclass(frozen=True)
class SysfsPciResolver(PciResolver):
    """
    Resolve interface names through sysfs.

    sysfs_root is configurable so tests can point it at a fake tree.
    """

    sysfs_root: Path = Path("/sys")

    def device_link(self, name: str) -> Path:
        return self.sysfs_root / "class" / "net" / name / "device"

    def pci_address_for_interface(self, name: str) -> str:
        link = self.device_link(name)
        if not link.exists():
            raise LinkResolutionError(f"interface {name} has no backing pci device: {link} not found")

        try:
            target = link.resolve(strict=True)
        except OSError as exc:
            raise LinkResolutionError(f"failed to resolve {link}: {exc}") from exc

        return target.name
