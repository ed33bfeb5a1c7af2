from __future__ import annotations

import logging

from .reconcile import ReconciliationEngine
from .resolver import Resolver
from .tether import LifecycleTether, TetherState

logger = logging.getLogger(__name__)


class DiscoveryLoop:
    """Resolve, reconcile, check the tether; repeat until the tether stops.

    There is no delay between cycles. The resolver's browse window is what
    paces the loop.
    """

    def __init__(
        self,
        service_type: str,
        resolver: Resolver,
        engine: ReconciliationEngine,
        tether: LifecycleTether,
    ) -> None:
        self.service_type = service_type
        self._resolve = resolver
        self.engine = engine
        self.tether = tether
        self.cycles = 0

    async def run_once(self) -> TetherState:
        hosts = await self._resolve(self.service_type)
        self.engine.reconcile(hosts)
        self.cycles += 1
        return self.tether.check()

    async def run(self) -> None:
        logger.debug("Discovery loop started for %s", self.service_type)
        while await self.run_once() is TetherState.RUNNING:
            pass
        logger.debug("Discovery loop stopped after %d cycles", self.cycles)
