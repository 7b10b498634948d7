"""
InfiniBand VF GUID provisioner.

This is the composition layer.
It wires the GUID pool to the host collaborators that write GUIDs and unbind
drivers.

Fallback contract
No config file means random mode: every VF gets a freshly drawn GUID.
With a config, a failed lookup for a PF or VF index is logged and the VF
still gets a random GUID. Only host write and unbind errors reach the caller.
"""

from __future__ import annotations

import logging
import random
from typing import Any

from ib_guid_provisioner.config.settings import ProvisionerConfig
from ib_guid_provisioner.core.errors import ConfigAbsent, PoolLookupError
from ib_guid_provisioner.core.guid import Guid, random_guid
from ib_guid_provisioner.host.base import DeviceBinder, LinkManager, PciResolver
from ib_guid_provisioner.pool.guid_pool import GuidPool

logger = logging.getLogger(__name__)


class InfinibandProvisioner:
    """
    Assign GUIDs to InfiniBand VFs.

    link_manager
    Lists live links and writes VF node and port GUIDs.

    device_binder
    Unbinds the VF driver once both GUIDs are written.

    pci_resolver
    Used while loading the config to map pfGuid records to PCI addresses.

    rng
    Optional random source for fallback GUIDs. Defaults to SystemRandom.
    """

    def __init__(
        self,
        link_manager: LinkManager,
        device_binder: DeviceBinder,
        pci_resolver: PciResolver,
        config: ProvisionerConfig | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._config = config or ProvisionerConfig()
        self._link_manager = link_manager
        self._device_binder = device_binder
        self._rng = rng
        self._pool = self._load_pool(pci_resolver)

    def _load_pool(self, pci_resolver: PciResolver) -> GuidPool | None:
        """
        Build the pool once at startup.

        A missing config file is not an error. Everything else is fatal.
        """
        config_path = self._config.resolved_config_path
        links = self._link_manager.list_links()

        try:
            pool = GuidPool.from_config(config_path, links, pci_resolver)
        except ConfigAbsent:
            logger.info("ib guid config %s doesn't exist, continuing with random guids", config_path)
            return None

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("ib guid pool loaded from %s: %s", config_path, pool.to_json())
        return pool

    @property
    def pool(self) -> GuidPool | None:
        return self._pool

    @property
    def has_pool(self) -> bool:
        return self._pool is not None

    def configure_vf_guid(self, vf_address: str, pf_address: str, vf_index: int, pf_link: Any) -> Guid:
        """
        Assign a GUID to one VF and unbind its driver.

        Steps
        1) draw a random candidate
        2) replace it with the pool GUID when the pool has one
        3) write node GUID, then port GUID
        4) unbind the VF driver

        Returns the GUID that was written.
        """

        guid = random_guid(self._rng)

        if self._pool is not None:
            try:
                guid = self._pool.get_next_free_guid(pf_address, vf_index)
            except PoolLookupError as exc:
                logger.warning(
                    "failed to get guid from ib guid pool for vf %s, falling back to random guid %s: %s",
                    vf_address,
                    guid,
                    exc,
                )

        self._apply_vf_guid(guid, vf_address, vf_index, pf_link)
        return guid

    def _apply_vf_guid(self, guid: Guid, vf_address: str, vf_index: int, pf_link: Any) -> None:
        logger.debug("setting guid %s on vf %d (%s)", guid, vf_index, vf_address)
        self._link_manager.set_vf_node_guid(pf_link, vf_index, guid)
        self._link_manager.set_vf_port_guid(pf_link, vf_index, guid)
        self._device_binder.unbind(vf_address)
