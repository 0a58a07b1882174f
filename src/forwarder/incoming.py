"""Decisions on incoming trade offers and forwarding of what they bring."""
import asyncio
from typing import Awaitable, Callable, Optional

from src.forwarder.config import BotIdentity
from src.forwarder.dispatcher import OfferDispatcher
from src.forwarder.flag import RecoveryFlag
from src.forwarder.log import BotLogger, bot_logger
from src.forwarder.tasks import BackgroundTasks
from src.steam.exceptions import ExchangeFailedError, ExchangePendingError, is_accept_conflict, is_transient
from src.steam.protocols import TradeOffer
from src.steam.types import ExchangeDetails, Item, OfferState, TradeStatus

Sleep = Callable[[float], Awaitable[None]]

ACCEPT_ATTEMPTS = 3
CONFLICT_WAIT_MINUTES = 15
DETAILS_FETCH_RETRIES = 5
DETAILS_FETCH_STEP = 20.0
DETAILS_PENDING_RETRIES = 3
DETAILS_PENDING_WAIT = 60.0


def accept_retry_wait(attempt: int, err: BaseException) -> float:
    """Seconds to wait after failed accept attempt ``attempt`` (1-based)."""
    minutes = CONFLICT_WAIT_MINUTES if is_accept_conflict(err) else attempt
    return minutes * 60.0


def status_name(code: int) -> str:
    """Enum name of a trade status code, or UNKNOWN(n) for codes not in TradeStatus."""
    try:
        return TradeStatus(code).name
    except ValueError:
        return f"UNKNOWN({code})"


class IncomingOfferHandler:
    """Accepts gifts, declines anything that would take items, and passes
    received items straight on to the recipients.
    """

    def __init__(
        self,
        identity: BotIdentity,
        dispatcher: OfferDispatcher,
        flag: RecoveryFlag,
        sleep: Sleep = asyncio.sleep,
        log: Optional[BotLogger] = None,
    ) -> None:
        self._identity = identity
        self._dispatcher = dispatcher
        self._flag = flag
        self._sleep = sleep
        self._log = log or bot_logger(__name__, identity.tag)
        self._tasks = BackgroundTasks(self._log)
        self._states: dict[str, OfferState] = {}

    @property
    def tasks(self) -> BackgroundTasks:
        return self._tasks

    def state_of(self, offer_id: str) -> Optional[OfferState]:
        """Last lifecycle state reached by an offer this handler has seen."""
        return self._states.get(str(offer_id))

    def _enter(self, offer: TradeOffer, state: OfferState) -> OfferState:
        self._states[str(offer.id)] = state
        self._log.debug("Trade offer #%s is %s", offer.id, state.value)
        return state

    def on_new_offer(self, offer: TradeOffer) -> None:
        self._tasks.spawn(self.handle(offer), name=f"offer-{offer.id}")

    async def handle(self, offer: TradeOffer) -> OfferState:
        """Run one offer through its lifecycle and return the final state."""
        self._enter(offer, OfferState.OBSERVED)
        if offer.items_to_give:
            try:
                await offer.decline()
            except Exception as e:
                self._log.warning("Could not decline trade offer #%s: %s", offer.id, e)
            self._log.info("Declined trade offer from %s trying to take my items.", offer.partner)
            return self._enter(offer, OfferState.DECLINED)

        self._enter(offer, OfferState.ACCEPTING)
        state = self._enter(offer, await self.accept(offer))
        if state is not OfferState.ACCEPTED:
            return state

        self._enter(offer, OfferState.DETAILS_PENDING)
        try:
            details = await self.resolve_exchange(offer)
        except Exception as e:
            self._log.error("Could not resolve exchange for trade offer #%s, leaving it to recovery: %s", offer.id, e)
            self._flag.set(f"exchange details for offer #{offer.id}")
            return self._enter(offer, OfferState.FORWARD_ABANDONED)
        self._enter(offer, OfferState.DETAILS_RESOLVED)

        items = [
            Item(appid=self._identity.app_id, contextid=self._identity.context_id, assetid=str(r.new_assetid))
            for r in details.received
        ]
        if not items:
            return OfferState.DETAILS_RESOLVED
        self._log.info("Forwarding %d items received in trade offer #%s.", len(items), offer.id)
        self._dispatcher.dispatch(items)
        return self._enter(offer, OfferState.FORWARDED)

    async def accept(self, offer: TradeOffer) -> OfferState:
        """Accept with up to three attempts."""
        for attempt in range(1, ACCEPT_ATTEMPTS + 1):
            try:
                await offer.accept(skip_state_update=True)
            except Exception as e:
                if attempt == ACCEPT_ATTEMPTS:
                    self._log.warning(
                        "Failed to accept trade offer after %d tries (might have been accepted already): %s",
                        ACCEPT_ATTEMPTS, e)
                    return OfferState.ACCEPT_FAILED
                wait = accept_retry_wait(attempt, e)
                self._log.warning("Error accepting trade offer #%s from %s. Trying again in %d minutes.",
                                  offer.id, offer.partner, wait // 60)
                await self._sleep(wait)
                continue
            self._log.info("Accepted trade offer #%s from %s.", offer.id, offer.partner)
            return OfferState.ACCEPTED
        return OfferState.ACCEPT_FAILED

    async def resolve_exchange(self, offer: TradeOffer) -> ExchangeDetails:
        """Poll exchange details until the exchange completes.

        Raises:
            ExchangeFailedError: The exchange reported a status past COMPLETE.
            ExchangePendingError: Still processing after every status retry.
            SteamError: A fetch error that is not transient, or transient
                errors beyond the retry limit.
        """
        fetch_retries = 0
        pending_retries = 0
        while True:
            try:
                details = await offer.get_exchange_details()
            except Exception as e:
                if not is_transient(e) or fetch_retries >= DETAILS_FETCH_RETRIES:
                    raise
                wait = (fetch_retries + 1) * DETAILS_FETCH_STEP
                fetch_retries += 1
                self._log.info("Exchange details for #%s unavailable (%s), retrying in %ds.", offer.id, e, wait)
                await self._sleep(wait)
                continue

            status = int(details.status)
            if status == TradeStatus.COMPLETE:
                return details
            if status > TradeStatus.COMPLETE:
                raise ExchangeFailedError(
                    f"Trade offer #{offer.id} exchange failed with status {status_name(status)}", status=status)
            if pending_retries >= DETAILS_PENDING_RETRIES:
                raise ExchangePendingError(f"Trade offer #{offer.id} still {status_name(status)} after "
                                           f"{DETAILS_PENDING_RETRIES} retries", status=status)
            pending_retries += 1
            self._log.info("Exchange for #%s is %s, checking again in %ds.", offer.id, status_name(status),
                           DETAILS_PENDING_WAIT)
            await self._sleep(DETAILS_PENDING_WAIT)
