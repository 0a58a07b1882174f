"""Periodic full-inventory rescan while recovery is needed."""
import asyncio
from typing import Awaitable, Callable, Optional

from src.forwarder.config import BotIdentity, Timings
from src.forwarder.dispatcher import OfferDispatcher
from src.forwarder.flag import RecoveryFlag
from src.forwarder.log import BotLogger, bot_logger
from src.forwarder.tasks import BackgroundTasks
from src.steam.exceptions import is_transient
from src.steam.protocols import InventorySource

Sleep = Callable[[float], Awaitable[None]]


class RecoveryLoop:
    """Re-sends the whole tradable inventory whenever the flag is set.

    This is the backstop for every dropped send or abandoned forward:
    anything still in the inventory goes out again on the next tick.
    """

    def __init__(
        self,
        identity: BotIdentity,
        inventory: InventorySource,
        dispatcher: OfferDispatcher,
        flag: RecoveryFlag,
        timings: Optional[Timings] = None,
        sleep: Sleep = asyncio.sleep,
        log: Optional[BotLogger] = None,
    ) -> None:
        self._identity = identity
        self._inventory = inventory
        self._dispatcher = dispatcher
        self._flag = flag
        self._timings = timings or Timings()
        self._sleep = sleep
        self._log = log or bot_logger(__name__, identity.tag)
        self._tasks = BackgroundTasks(self._log)
        self._task: Optional[asyncio.Task] = None

    async def tick(self) -> int:
        """Run one recovery cycle. Returns the number of items dispatched."""
        if not self._flag.is_set:
            return 0
        try:
            items = await self._inventory.get_inventory_contents(
                self._identity.app_id, self._identity.context_id, True)
        except Exception as e:
            if not is_transient(e):
                self._log.warning("Error loading inventory: %s", e)
            return 0
        if not items:
            return 0
        # Cleared before sending; a failing send sets it again.
        self._flag.clear()
        self._dispatcher.dispatch(items)
        return len(items)

    async def run(self) -> None:
        while True:
            await self._sleep(self._timings.recovery_interval)
            try:
                await self.tick()
            except Exception as e:
                self._log.exception("Recovery tick failed: %s", e)

    def start(self) -> asyncio.Task:
        if self._task is None or self._task.done():
            self._task = self._tasks.spawn(self.run(), name=f"recovery-{self._identity.username}")
        return self._task

    def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()
