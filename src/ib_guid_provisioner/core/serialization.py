from __future__ import annotations

from typing import Any

from ib_guid_provisioner.core.types import AllocationSpec, GuidConfigTable, GuidList, GuidRange


def allocation_spec_to_json(spec: AllocationSpec) -> dict[str, Any]:
    """
    Convert an allocation spec back into its config file shape.

    GUIDs are emitted in canonical lowercase form.
    """
    if isinstance(spec, GuidList):
        return {"guids": [str(g) for g in spec.guids]}
    if isinstance(spec, GuidRange):
        return {"rangeStart": str(spec.start), "rangeEnd": str(spec.end)}
    raise TypeError(f"unsupported allocation spec: {type(spec).__name__}")


def guid_table_to_json(table: GuidConfigTable) -> list[dict[str, Any]]:
    """
    Config table transport shape.

    One record per PCI address, sorted by address for deterministic output.
    Records always carry pciAddress, even when the file used pfGuid.
    """
    records = []
    for pci_address in sorted(table.keys()):
        record: dict[str, Any] = {"pciAddress": pci_address}
        record.update(allocation_spec_to_json(table[pci_address]))
        records.append(record)
    return records
