"""Batching and sending of outgoing trade offers."""
import asyncio
import math
import random
from typing import Optional, Sequence

from src.forwarder.config import BotIdentity
from src.forwarder.flag import RecoveryFlag
from src.forwarder.log import BotLogger, bot_logger
from src.forwarder.tasks import BackgroundTasks
from src.steam.exceptions import is_offer_limit
from src.steam.protocols import TradeOffer, TradeOfferManager
from src.steam.types import Item, OfferFilter

MIN_BATCH_SIZE = 50
MAX_BATCHES = 5


def batch_size(total: int) -> int:
    """Items per offer: at least 50, and never more than 5 offers in total."""
    return max(MIN_BATCH_SIZE, math.ceil(total / MAX_BATCHES))


def chunk(items: Sequence[Item], size: int) -> list[list[Item]]:
    return [list(items[i:i + size]) for i in range(0, len(items), size)]


class OfferDispatcher:
    """Sends items to the bot's recipients, one offer per batch.

    Batches are independent: each send runs in its own task and a failure
    in one never touches the others. Failed sends are not retried here;
    they set the recovery flag so the next recovery scan re-sends whatever
    is still in the inventory.
    """

    def __init__(
        self,
        identity: BotIdentity,
        manager: TradeOfferManager,
        flag: RecoveryFlag,
        rng: Optional[random.Random] = None,
        log: Optional[BotLogger] = None,
    ) -> None:
        self._identity = identity
        self._manager = manager
        self._flag = flag
        self._rng = rng or random.Random()
        self._log = log or bot_logger(__name__, identity.tag)
        self._tasks = BackgroundTasks(self._log)

    @property
    def tasks(self) -> BackgroundTasks:
        return self._tasks

    def dispatch(self, items: Sequence[Item]) -> list[asyncio.Task]:
        """Create and send one offer per batch. Returns the send tasks."""
        if not items:
            return []
        size = batch_size(len(items))
        batches = chunk(items, size)
        self._log.info("%d groups of up to %d items will be sent.", len(batches), size)
        tasks = []
        for i, batch in enumerate(batches, start=1):
            recipient = self._identity.choose_recipient(self._rng)
            offer = self._manager.create_offer(recipient)
            for item in batch:
                offer.add_my_item(item)
            self._log.info("Sending trade offer for group #%d of %d items to %s.", i, len(batch), recipient)
            tasks.append(self._tasks.spawn(self._send(offer, i), name=f"send-{self._identity.username}-{i}"))
        return tasks

    async def _send(self, offer: TradeOffer, group: int) -> None:
        try:
            status = await offer.send()
        except Exception as e:
            self._log.warning("Trade offer for group #%d failed: %s", group, e)
            if is_offer_limit(e):
                await self.cancel_active_offers()
            self._flag.set(f"send failed for group #{group}")
            return
        self._log.info("Trade offer #%s for group #%d sent (%s).", offer.id, group, status)

    async def cancel_active_offers(self) -> int:
        """Cancel every active offer this bot has sent. Best-effort."""
        try:
            sent, _ = await self._manager.get_offers(OfferFilter.ACTIVE_ONLY)
        except Exception as e:
            self._log.error("Could not load active offers to cancel: %s", e)
            return 0
        cancelled = 0
        for offer in sent:
            try:
                await offer.cancel()
                cancelled += 1
            except Exception as e:
                self._log.warning("Could not cancel trade offer #%s: %s", offer.id, e)
        self._log.info("Cancelled %d of %d active trade offers.", cancelled, len(sent))
        return cancelled
