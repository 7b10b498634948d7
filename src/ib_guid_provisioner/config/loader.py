"""
GUID config loader.

Reads a local json file that contains a list of per PF records.
Each record names its PF either by PCI address or by PF GUID, and gives
either an explicit GUID list or a GUID range for its VFs.

Schema example
[
  {"pciAddress": "0000:3b:00.0", "guids": ["00:00:00:00:00:00:00:00", "00:00:00:00:00:00:00:01"]},
  {"pfGuid": "00:11:22:33:44:55:66:77", "rangeStart": "00:00:00:00:00:00:01:00", "rangeEnd": "00:00:00:00:00:00:01:ff"}
]

Loading is all or nothing. Any bad record aborts the whole load.
A missing file raises ConfigAbsent so callers can treat it as no config.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable

from ib_guid_provisioner.core.errors import (
    ConfigAbsent,
    ConfigParseError,
    ConfigValidationError,
    GuidParseError,
    LinkResolutionError,
)
from ib_guid_provisioner.core.guid import Guid
from ib_guid_provisioner.core.types import (
    AllocationSpec,
    GuidConfigTable,
    GuidList,
    GuidRange,
    LinkInfo,
    RawGuidRecord,
    freeze_table,
)
from ib_guid_provisioner.host.base import PciResolver

logger = logging.getLogger(__name__)


def _optional_str(obj: dict[str, Any], key: str, index: int) -> str:
    value = obj.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ConfigParseError(f"record {index}: {key} must be a string")
    return value


def _optional_str_list(obj: dict[str, Any], key: str, index: int) -> tuple[str, ...]:
    value = obj.get(key)
    if value is None:
        return ()
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigParseError(f"record {index}: {key} must be a list of strings")
    return tuple(value)


def _record_from_dict(obj: Any, index: int) -> RawGuidRecord:
    """Convert one json element into a RawGuidRecord. Unknown keys are ignored."""
    if not isinstance(obj, dict):
        raise ConfigParseError(f"record {index}: expected an object")

    return RawGuidRecord(
        pci_address=_optional_str(obj, "pciAddress", index),
        pf_guid=_optional_str(obj, "pfGuid", index),
        guids=_optional_str_list(obj, "guids", index),
        range_start=_optional_str(obj, "rangeStart", index),
        range_end=_optional_str(obj, "rangeEnd", index),
    )


def read_json_config(path: Path) -> list[RawGuidRecord]:
    """
    Read the config file and decode it into raw records.

    No validation beyond json types happens here.
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ConfigAbsent(f"ib guid config not found: {path}") from exc
    except UnicodeDecodeError as exc:
        raise ConfigParseError(f"failed to decode ib guid config from json: {exc}") from exc

    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigParseError(f"failed to decode ib guid config from json: {exc}") from exc

    if data is None:
        return []
    if not isinstance(data, list):
        raise ConfigParseError("failed to decode ib guid config from json: expected an array")

    return [_record_from_dict(obj, i) for i, obj in enumerate(data)]


def resolve_pf_pci_address(
    record: RawGuidRecord,
    links: Iterable[LinkInfo],
    pci_resolver: PciResolver,
) -> str:
    """
    Return the PCI address of the PF a record describes.

    pfGuid is matched against the hardware address text of live links.
    """
    if record.pci_address and record.pf_guid:
        raise ConfigValidationError(
            "either PCI address or PF GUID required to describe an interface, both provided"
        )

    if record.pci_address:
        return record.pci_address

    if record.pf_guid:
        for link in links:
            if link.hardware_addr == record.pf_guid:
                return pci_resolver.pci_address_for_interface(link.name)
        raise LinkResolutionError(f"no matching link found for pf guid: {record.pf_guid}")

    raise ConfigValidationError(
        "either PCI address or PF GUID required to describe an interface, none provided"
    )


def parse_allocation_spec(record: RawGuidRecord) -> AllocationSpec:
    """Validate the allocation mode of a record and parse its GUIDs."""
    has_list = len(record.guids) != 0
    has_start = record.range_start != ""
    has_end = record.range_end != ""

    if has_list and (has_start or has_end):
        raise ConfigValidationError("either guid list or guid range should be provided, got both")

    if has_start != has_end:
        raise ConfigValidationError("both guid rangeStart and rangeEnd should be provided, got one")

    if has_list:
        guids = []
        for text in record.guids:
            try:
                guids.append(Guid.parse(text))
            except GuidParseError as exc:
                raise GuidParseError(f"failed to parse ib guid {text}: {exc}") from exc
        return GuidList(guids=tuple(guids))

    if has_start and has_end:
        try:
            start = Guid.parse(record.range_start)
        except GuidParseError as exc:
            raise GuidParseError(f"failed to parse ib guid range start: {exc}") from exc

        try:
            end = Guid.parse(record.range_end)
        except GuidParseError as exc:
            raise GuidParseError(f"failed to parse ib guid range end: {exc}") from exc

        return GuidRange(start=start, end=end)

    raise ConfigValidationError("either guid list or guid range should be provided, got none")


def build_guid_table(
    records: Iterable[RawGuidRecord],
    links: Iterable[LinkInfo],
    pci_resolver: PciResolver,
) -> GuidConfigTable:
    """
    Resolve and validate raw records into a read only table.

    A later record for the same PCI address replaces an earlier one.
    """
    link_snapshot = list(links)
    entries: dict[str, AllocationSpec] = {}

    for record in records:
        pci_address = resolve_pf_pci_address(record, link_snapshot, pci_resolver)
        spec = parse_allocation_spec(record)

        if pci_address in entries:
            logger.warning("ib guid config has more than one record for %s, last one wins", pci_address)
        entries[pci_address] = spec

    return freeze_table(entries)


def load_guid_config(
    path: Path,
    links: Iterable[LinkInfo],
    pci_resolver: PciResolver,
) -> GuidConfigTable:
    """Read, resolve, and validate the GUID config at path."""
    records = read_json_config(path)
    table = build_guid_table(records, links, pci_resolver)
    logger.debug("loaded ib guid config from %s with %d pf entries", path, len(table))
    return table
