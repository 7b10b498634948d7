"""
GUID pool.

Answers "which GUID does VF n of this PF get" from a loaded config table.

Lookup is a pure function of (pf pci address, vf index).
Nothing is consumed or marked used, so asking twice for the same VF
returns the same GUID. "Exhausted" means the index is past the configured
list or range, not that earlier VFs used the GUIDs up.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable

from ib_guid_provisioner.config.loader import load_guid_config
from ib_guid_provisioner.core.errors import GuidPoolExhausted, GuidPoolNotFound
from ib_guid_provisioner.core.guid import Guid
from ib_guid_provisioner.core.serialization import guid_table_to_json
from ib_guid_provisioner.core.types import GuidConfigTable, GuidList, GuidRange, LinkInfo
from ib_guid_provisioner.host.base import PciResolver


class GuidPool:
    """Read only GUID lookup keyed by PF PCI address."""

    def __init__(self, table: GuidConfigTable) -> None:
        self._table = table

    @classmethod
    def from_config(
        cls,
        path: Path,
        links: Iterable[LinkInfo],
        pci_resolver: PciResolver,
    ) -> GuidPool:
        """All validation happens in load_guid_config."""
        return cls(load_guid_config(path, links, pci_resolver))

    def get_next_free_guid(self, pf_pci_address: str, vf_index: int) -> Guid:
        """
        Return the GUID configured for VF vf_index of the PF.

        Raises
        GuidPoolNotFound when the PF has no entry.
        GuidPoolExhausted when vf_index is outside the list or range.
        """
        spec = self._table.get(pf_pci_address)
        if spec is None:
            raise GuidPoolNotFound(f"no guid pool for pci address: {pf_pci_address}")

        exhausted = GuidPoolExhausted(f"guid pool exhausted for pci address: {pf_pci_address}")
        if vf_index < 0:
            raise exhausted

        if isinstance(spec, GuidList):
            if vf_index >= len(spec.guids):
                raise exhausted
            return spec.guids[vf_index]

        if isinstance(spec, GuidRange):
            if int(spec.start) + vf_index > int(spec.end):
                raise exhausted
            return spec.start + vf_index

        raise TypeError(f"unsupported allocation spec: {type(spec).__name__}")

    def pci_addresses(self) -> list[str]:
        """Return sorted PF addresses. Useful for deterministic outputs."""
        return sorted(self._table.keys())

    def to_json(self) -> list[dict[str, Any]]:
        return guid_table_to_json(self._table)

    def __contains__(self, pf_pci_address: object) -> bool:
        return pf_pci_address in self._table

    def __len__(self) -> int:
        return len(self._table)
