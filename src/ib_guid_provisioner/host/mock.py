"""
In memory host collaborators.

These are used for tests and local simulations.
They record every call so the order of GUID writes and unbinds can be checked.

Features
- Static link inventory for PF GUID resolution
- Records node and port GUIDs keyed by (pf link, vf index)
- Can inject failures per operation to exercise error propagation
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ib_guid_provisioner.core.errors import LinkResolutionError
from ib_guid_provisioner.core.guid import Guid
from ib_guid_provisioner.core.types import LinkInfo
from ib_guid_provisioner.host.base import DeviceBinder, LinkManager, PciResolver


@dataclass
class InMemoryLinkManager(LinkManager):
    """
    In memory link manager.

    list_links_error
    When set, list_links raises it instead of returning the snapshot.

    node_guid_error / port_guid_error
    When set, the matching setter raises it instead of recording the GUID.
    """

    links: list[LinkInfo] = field(default_factory=list)
    list_links_error: Exception | None = None
    node_guid_error: Exception | None = None
    port_guid_error: Exception | None = None
    node_guids: dict[tuple[Any, int], Guid] = field(default_factory=dict)
    port_guids: dict[tuple[Any, int], Guid] = field(default_factory=dict)
    calls: list[str] = field(default_factory=list)

    def list_links(self) -> list[LinkInfo]:
        self.calls.append("list_links")
        if self.list_links_error is not None:
            raise self.list_links_error
        return list(self.links)

    def set_vf_node_guid(self, pf_link: Any, vf_index: int, guid: Guid) -> None:
        self.calls.append("set_vf_node_guid")
        if self.node_guid_error is not None:
            raise self.node_guid_error
        self.node_guids[(pf_link, vf_index)] = guid

    def set_vf_port_guid(self, pf_link: Any, vf_index: int, guid: Guid) -> None:
        self.calls.append("set_vf_port_guid")
        if self.port_guid_error is not None:
            raise self.port_guid_error
        self.port_guids[(pf_link, vf_index)] = guid


@dataclass
class InMemoryDeviceBinder(DeviceBinder):
    """Records unbound PCI addresses in call order."""

    error: Exception | None = None
    unbound: list[str] = field(default_factory=list)

    def unbind(self, pci_address: str) -> None:
        if self.error is not None:
            raise self.error
        self.unbound.append(pci_address)


@dataclass(frozen=True)
class StaticPciResolver(PciResolver):
    """Resolve interface names from a fixed name to PCI address mapping."""

    addresses: dict[str, str] = field(default_factory=dict)

    def pci_address_for_interface(self, name: str) -> str:
        try:
            return self.addresses[name]
        except KeyError:
            raise LinkResolutionError(f"interface {name} has no backing pci device") from None
