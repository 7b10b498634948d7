from __future__ import annotations

from pathlib import Path

import pytest

from ib_guid_provisioner.core.errors import GuidPoolExhausted, GuidPoolNotFound, PoolLookupError
from ib_guid_provisioner.core.guid import Guid
from ib_guid_provisioner.core.types import GuidList, GuidRange, freeze_table
from ib_guid_provisioner.host.mock import StaticPciResolver
from ib_guid_provisioner.pool.guid_pool import GuidPool

CONFIG = (
    '[{"pciAddress":"0000:3b:00.0","guids":["00:00:00:00:00:00:00:00","00:00:00:00:00:00:00:01"]},'
    '{"pciAddress":"0000:3b:00.1","rangeStart":"00:00:00:00:00:00:01:00","rangeEnd":"00:00:00:00:00:00:01:02"}]'
)


def make_pool(tmp_path: Path) -> GuidPool:
    path = tmp_path / "config.json"
    path.write_text(CONFIG, encoding="utf-8")
    return GuidPool.from_config(path, [], StaticPciResolver())


def test_guid_list_lookup(tmp_path: Path):
    pool = make_pool(tmp_path)

    assert str(pool.get_next_free_guid("0000:3b:00.0", 0)) == "00:00:00:00:00:00:00:00"
    assert str(pool.get_next_free_guid("0000:3b:00.0", 1)) == "00:00:00:00:00:00:00:01"
    assert str(pool.get_next_free_guid("0000:3b:00.0", 0)) == "00:00:00:00:00:00:00:00"

    for index in (2, 5):
        with pytest.raises(GuidPoolExhausted, match="guid pool exhausted for pci address: 0000:3b:00.0"):
            pool.get_next_free_guid("0000:3b:00.0", index)


def test_guid_range_lookup(tmp_path: Path):
    pool = make_pool(tmp_path)

    assert str(pool.get_next_free_guid("0000:3b:00.1", 0)) == "00:00:00:00:00:00:01:00"
    assert str(pool.get_next_free_guid("0000:3b:00.1", 1)) == "00:00:00:00:00:00:01:01"
    assert str(pool.get_next_free_guid("0000:3b:00.1", 2)) == "00:00:00:00:00:00:01:02"

    for index in (3, 5):
        with pytest.raises(GuidPoolExhausted, match="guid pool exhausted for pci address: 0000:3b:00.1"):
            pool.get_next_free_guid("0000:3b:00.1", index)

    assert str(pool.get_next_free_guid("0000:3b:00.1", 1)) == "00:00:00:00:00:00:01:01"


def test_unknown_pf_is_not_found(tmp_path: Path):
    pool = make_pool(tmp_path)

    with pytest.raises(GuidPoolNotFound, match="no guid pool for pci address: 0000:af:00.0"):
        pool.get_next_free_guid("0000:af:00.0", 0)


def test_negative_index_is_out_of_bounds(tmp_path: Path):
    pool = make_pool(tmp_path)

    with pytest.raises(GuidPoolExhausted):
        pool.get_next_free_guid("0000:3b:00.0", -1)
    with pytest.raises(GuidPoolExhausted):
        pool.get_next_free_guid("0000:3b:00.1", -1)


def test_lookup_errors_share_a_base_class():
    pool = GuidPool(freeze_table({}))

    with pytest.raises(PoolLookupError):
        pool.get_next_free_guid("0000:3b:00.0", 0)


def test_range_lookup_is_idempotent():
    start = Guid.parse("00:00:00:00:00:00:10:00")
    pool = GuidPool(freeze_table({"pf": GuidRange(start=start, end=start + 63)}))

    for index in range(64):
        first = pool.get_next_free_guid("pf", index)
        assert first == start + index
        assert pool.get_next_free_guid("pf", index) == first

    with pytest.raises(GuidPoolExhausted):
        pool.get_next_free_guid("pf", 64)


def test_range_at_top_of_address_space_does_not_wrap():
    start = Guid.parse("ff:ff:ff:ff:ff:ff:ff:fe")
    pool = GuidPool(freeze_table({"pf": GuidRange(start=start, end=Guid.parse("ff:ff:ff:ff:ff:ff:ff:ff"))}))

    assert str(pool.get_next_free_guid("pf", 1)) == "ff:ff:ff:ff:ff:ff:ff:ff"
    with pytest.raises(GuidPoolExhausted):
        pool.get_next_free_guid("pf", 2)


def test_pool_introspection(tmp_path: Path):
    pool = make_pool(tmp_path)

    assert pool.pci_addresses() == ["0000:3b:00.0", "0000:3b:00.1"]
    assert "0000:3b:00.0" in pool
    assert len(pool) == 2
    assert pool.to_json() == [
        {"pciAddress": "0000:3b:00.0", "guids": ["00:00:00:00:00:00:00:00", "00:00:00:00:00:00:00:01"]},
        {"pciAddress": "0000:3b:00.1", "rangeStart": "00:00:00:00:00:00:01:00", "rangeEnd": "00:00:00:00:00:00:01:02"},
    ]


def test_single_entry_list():
    guid = Guid.parse("00:00:00:00:00:00:00:07")
    pool = GuidPool(freeze_table({"pf": GuidList(guids=(guid,))}))

    assert pool.get_next_free_guid("pf", 0) == guid
    with pytest.raises(GuidPoolExhausted):
        pool.get_next_free_guid("pf", 1)
