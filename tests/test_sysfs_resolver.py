from __future__ import annotations

from pathlib import Path

import pytest

from ib_guid_provisioner.config.loader import load_guid_config
from ib_guid_provisioner.core.errors import LinkResolutionError
from ib_guid_provisioner.core.types import LinkInfo
from ib_guid_provisioner.host.sysfs import SysfsPciResolver


def make_sysfs(root: Path) -> Path:
    device = root / "bus" / "pci" / "devices" / "0000:3b:00.0"
    device.mkdir(parents=True)
    intf = root / "class" / "net" / "ib216s0f0"
    intf.mkdir(parents=True)
    (intf / "device").symlink_to(device)
    (root / "class" / "net" / "lo").mkdir(parents=True)
    return root


def test_resolves_interface_to_pci_address(tmp_path: Path):
    resolver = SysfsPciResolver(sysfs_root=make_sysfs(tmp_path))

    assert resolver.pci_address_for_interface("ib216s0f0") == "0000:3b:00.0"


def test_interface_without_device_fails(tmp_path: Path):
    resolver = SysfsPciResolver(sysfs_root=make_sysfs(tmp_path))

    with pytest.raises(LinkResolutionError, match="lo has no backing pci device"):
        resolver.pci_address_for_interface("lo")

    with pytest.raises(LinkResolutionError):
        resolver.pci_address_for_interface("missing0")


def test_loader_resolves_pf_guid_through_sysfs(tmp_path: Path):
    resolver = SysfsPciResolver(sysfs_root=make_sysfs(tmp_path / "sys"))
    config = tmp_path / "guids.json"
    config.write_text(
        '[{"pfGuid": "00:11:22:33:44:55:66:77", "rangeStart": "00:00:00:00:00:00:01:00", '
        '"rangeEnd": "00:00:00:00:00:00:01:ff"}]',
        encoding="utf-8",
    )
    links = [LinkInfo(name="ib216s0f0", hardware_addr="00:11:22:33:44:55:66:77")]

    table = load_guid_config(config, links, resolver)

    assert list(table.keys()) == ["0000:3b:00.0"]


def test_sysfs_resolver_is_exported_from_host_package():
    from ib_guid_provisioner import host

    assert host.SysfsPciResolver is SysfsPciResolver
    assert "SysfsPciResolver" in host.__all__
