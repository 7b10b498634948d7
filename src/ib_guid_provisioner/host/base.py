"""
Host interfaces.

Goal
Define the narrow host capabilities the provisioner consumes without binding
it to a specific netlink library or sysfs layout.

Design notes
LinkManager owns link enumeration and the VF GUID writes.
DeviceBinder owns driver unbinding.
PciResolver maps an interface name to its backing PCI address.

Errors raised by these collaborators are passed to the caller unmodified.
"""

from __future__ import annotations

from typing import Any, Protocol

from ib_guid_provisioner.core.guid import Guid
from ib_guid_provisioner.core.types import LinkInfo


class LinkManager(Protocol):
    """
    Minimal netlink shaped link interface.

    list_links
    Returns a snapshot of live links with their hardware addresses.

    set_vf_node_guid / set_vf_port_guid
    Write the VF GUID attributes through the PF link.
    """

    def list_links(self) -> list[LinkInfo]:
        """Return all live links."""

    def set_vf_node_guid(self, pf_link: Any, vf_index: int, guid: Guid) -> None:
        """Set the node GUID of VF vf_index under pf_link."""

    def set_vf_port_guid(self, pf_link: Any, vf_index: int, guid: Guid) -> None:
        """Set the port GUID of VF vf_index under pf_link."""


class DeviceBinder(Protocol):
    """Unbind the driver of a PCI device."""

    def unbind(self, pci_address: str) -> None:
        """Unbind whatever driver currently owns pci_address."""


class PciResolver(Protocol):
    """
    Resolve an interface name to the PCI address of its device.

    Implementations raise LinkResolutionError when the interface has no
    backing PCI device.
    """

    def pci_address_for_interface(self, name: str) -> str:
        """Return the PCI address backing interface name."""
