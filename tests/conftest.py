"""Pytest fixtures: in-memory stand-ins for the Steam SDK clients."""
import asyncio
import base64
from typing import Any, Callable, Optional

import pytest

from src.forwarder.config import BotIdentity, Timings
from src.forwarder.flag import RecoveryFlag
from src.steam.protocols import SteamClients
from src.steam.types import ExchangeDetails, ExchangeItem, Item, LogOnDetails, OfferFilter, TradeStatus

SHARED_SECRET = base64.b64encode(b"0123456789abcdefghij").decode("ascii")


def _next(results: list, default: Any) -> Any:
    """Pop the next scripted result; raise it if it is an exception."""
    value = results.pop(0) if results else default
    if isinstance(value, BaseException):
        raise value
    return value


class RecordingSleep:
    """Async sleep replacement that records requested delays."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)
        await asyncio.sleep(0)


class FakeOffer:
    def __init__(self, offer_id: Optional[str] = "1", partner: str = "76561198000000001",
                 items_to_give: Optional[list[Item]] = None, items_to_receive: Optional[list[Item]] = None,
                 send_results: Optional[list] = None, accept_results: Optional[list] = None,
                 details_results: Optional[list] = None, cancel_error: Optional[Exception] = None) -> None:
        self.id = offer_id
        self.partner = partner
        self.items_to_give = items_to_give or []
        self.items_to_receive = items_to_receive or []
        self.added: list[Item] = []
        self._send_results = list(send_results or [])
        self._accept_results = list(accept_results or [])
        self._details_results = list(details_results or [])
        self._cancel_error = cancel_error
        self.send_calls = 0
        self.accept_calls = 0
        self.decline_calls = 0
        self.cancel_calls = 0
        self.details_calls = 0

    def add_my_item(self, item: Item) -> bool:
        self.added.append(item)
        return True

    async def send(self) -> str:
        self.send_calls += 1
        return _next(self._send_results, "sent")

    async def accept(self, skip_state_update: bool = False) -> str:
        self.accept_calls += 1
        return _next(self._accept_results, "accepted")

    async def decline(self) -> None:
        self.decline_calls += 1

    async def cancel(self) -> None:
        self.cancel_calls += 1
        if self._cancel_error is not None:
            raise self._cancel_error

    async def get_exchange_details(self) -> ExchangeDetails:
        self.details_calls += 1
        return _next(self._details_results, ExchangeDetails(status=TradeStatus.COMPLETE))


class FakeManager:
    def __init__(self) -> None:
        self.created: list[FakeOffer] = []
        self.send_results: dict[int, list] = {}
        self.inventory: list[Item] | Exception = []
        self.inventory_calls: list[tuple[int, int, bool]] = []
        self.active_sent: list[FakeOffer] = []
        self.get_offers_error: Optional[Exception] = None
        self.cookies: list[list[str]] = []
        self.set_cookies_results: list = []
        self.handlers: dict[str, Callable] = {}

    def create_offer(self, partner: str) -> FakeOffer:
        index = len(self.created) + 1
        offer = FakeOffer(offer_id=None, partner=partner, send_results=self.send_results.get(index))
        self.created.append(offer)
        return offer

    async def get_offers(self, offer_filter: OfferFilter) -> tuple[list[FakeOffer], list[FakeOffer]]:
        if self.get_offers_error is not None:
            raise self.get_offers_error
        return list(self.active_sent), []

    async def get_inventory_contents(self, appid: int, contextid: int, tradable_only: bool = True) -> list[Item]:
        self.inventory_calls.append((appid, contextid, tradable_only))
        if isinstance(self.inventory, Exception):
            raise self.inventory
        return list(self.inventory)

    async def set_cookies(self, cookies: list[str]) -> None:
        _next(self.set_cookies_results, None)
        self.cookies.append(cookies)

    def on(self, event: str, handler: Callable) -> None:
        self.handlers[event] = handler


class FakeCommunity:
    def __init__(self) -> None:
        self.login_results: list = []
        self.logins: list[LogOnDetails] = []
        self.handlers: dict[str, Callable] = {}
        self.confirmation_checker: Optional[tuple[int, str]] = None

    async def login(self, details: LogOnDetails) -> list[str]:
        self.logins.append(details)
        await asyncio.sleep(0)
        return _next(self.login_results, ["sessionid=abc", "steamLoginSecure=76561198000000002%7C%7Ctoken"])

    def start_confirmation_checker(self, interval_ms: int, identity_secret: str) -> None:
        self.confirmation_checker = (interval_ms, identity_secret)

    def on(self, event: str, handler: Callable) -> None:
        self.handlers[event] = handler


class FakeUser:
    def __init__(self) -> None:
        self.public_ip = "203.0.113.7"
        self.log_ons: list[LogOnDetails] = []
        self.log_on_results: list = []
        self.handlers: dict[str, Callable] = {}

    async def log_on(self, details: LogOnDetails) -> None:
        self.log_ons.append(details)
        _next(self.log_on_results, None)

    def on(self, event: str, handler: Callable) -> None:
        self.handlers[event] = handler


def make_items(count: int, appid: int = 730, contextid: int = 2) -> list[Item]:
    return [Item(appid=appid, contextid=contextid, assetid=str(1000 + i)) for i in range(count)]


@pytest.fixture
def identity() -> BotIdentity:
    return BotIdentity(
        username="alice", password="hunter2", shared_secret=SHARED_SECRET,
        identity_secret="aWRlbnRpdHk=", target="76561198000000009",
    )


@pytest.fixture
def multi_identity() -> BotIdentity:
    return BotIdentity(
        username="bob", password="hunter2", shared_secret=SHARED_SECRET,
        identity_secret="aWRlbnRpdHk=", target=["76561198000000010", "76561198000000011", "76561198000000012"],
    )


@pytest.fixture
def timings() -> Timings:
    return Timings()


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def flag() -> RecoveryFlag:
    return RecoveryFlag()


@pytest.fixture
def manager() -> FakeManager:
    return FakeManager()


@pytest.fixture
def community() -> FakeCommunity:
    return FakeCommunity()


@pytest.fixture
def user() -> FakeUser:
    return FakeUser()


@pytest.fixture
def clients(user: FakeUser, community: FakeCommunity, manager: FakeManager) -> SteamClients:
    return SteamClients(user=user, community=community, manager=manager)


@pytest.fixture
def items() -> Callable[..., list[Item]]:
    return make_items


@pytest.fixture
def offer_factory() -> type[FakeOffer]:
    return FakeOffer


@pytest.fixture
def exchange_item() -> Callable[[str], ExchangeItem]:
    def build(new_assetid: str) -> ExchangeItem:
        return ExchangeItem(appid=730, contextid=2, assetid="1", new_assetid=new_assetid, new_contextid=2)
    return build
