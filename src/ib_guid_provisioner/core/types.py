"""
Core types.

This file defines the shared data structures used across the provisioner.

Important design choice
An allocation spec is a closed union of two frozen records, GuidList and
GuidRange. Lookup code matches on the concrete type instead of calling a
virtual method.

The config table maps a PF PCI address to its allocation spec and is
read only once built.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Union

from ib_guid_provisioner.core.errors import ConfigValidationError
from ib_guid_provisioner.core.guid import Guid


@dataclass(frozen=True)
class LinkInfo:
    """
    Live link snapshot entry.

    name
      Kernel interface name, for example ib216s0f0.

    hardware_addr
      Hardware address string as reported by the link layer.
      PF GUID matching compares this text as is.

    handle
      Opaque object the link manager needs to address the PF.
    """

    name: str
    hardware_addr: str
    handle: Any = None


@dataclass(frozen=True)
class GuidList:
    """Explicit GUIDs, the VF index selects the entry."""

    guids: tuple[Guid, ...]

    def __len__(self) -> int:
        return len(self.guids)


@dataclass(frozen=True)
class GuidRange:
    """
    Contiguous GUID range, both bounds inclusive.

    The VF with index i gets start + i as long as that does not pass end.
    """

    start: Guid
    end: Guid

    def __post_init__(self) -> None:
        if self.end <= self.start:
            raise ConfigValidationError("range end cannot be less than or equal to range start")

    @property
    def size(self) -> int:
        return int(self.end) - int(self.start) + 1


AllocationSpec = Union[GuidList, GuidRange]

GuidConfigTable = Mapping[str, AllocationSpec]


def freeze_table(entries: dict[str, AllocationSpec]) -> GuidConfigTable:
    """Return a read only view over a copy of entries."""
    return MappingProxyType(dict(entries))


@dataclass(frozen=True)
class RawGuidRecord:
    """
    One element of the JSON config array before validation.

    Empty strings and empty lists mean the field was not set.
    """

    pci_address: str = ""
    pf_guid: str = ""
    guids: tuple[str, ...] = field(default_factory=tuple)
    range_start: str = ""
    range_end: str = ""
