"""Interfaces of the external Steam SDK clients.

The forwarder never talks to Steam directly. It drives four collaborators
whose wire protocol, cryptographic handshake and confirmation signing live
in third-party SDKs. Adapters for those SDKs only have to satisfy the
protocols below; handlers registered through ``on`` are plain callables
that the adapter invokes from the event loop.
"""
from dataclasses import dataclass
from typing import Any, Callable, Optional, Protocol, runtime_checkable

from src.steam.types import ExchangeDetails, Item, LogOnDetails, OfferFilter

EventHandler = Callable[..., Any]


class TradeOffer(Protocol):
    id: Optional[str]
    partner: str
    items_to_give: list[Item]
    items_to_receive: list[Item]

    def add_my_item(self, item: Item) -> bool: ...

    async def send(self) -> str: ...

    async def accept(self, skip_state_update: bool = False) -> str: ...

    async def decline(self) -> None: ...

    async def cancel(self) -> None: ...

    async def get_exchange_details(self) -> ExchangeDetails: ...


@runtime_checkable
class CookieSink(Protocol):
    async def set_cookies(self, cookies: list[str]) -> None: ...


@runtime_checkable
class InventorySource(Protocol):
    async def get_inventory_contents(
        self, appid: int, contextid: int, tradable_only: bool = True
    ) -> list[Item]: ...


class TradeOfferManager(CookieSink, InventorySource, Protocol):
    def create_offer(self, partner: str) -> TradeOffer: ...

    async def get_offers(
        self, offer_filter: OfferFilter
    ) -> tuple[list[TradeOffer], list[TradeOffer]]:
        """Return ``(sent, received)`` offers matching the filter."""
        ...

    def on(self, event: str, handler: EventHandler) -> None: ...


class SteamCommunity(Protocol):
    async def login(self, details: LogOnDetails) -> list[str]:
        """Log into the community website and return the session cookies."""
        ...

    def start_confirmation_checker(self, interval_ms: int, identity_secret: str) -> None: ...

    def on(self, event: str, handler: EventHandler) -> None: ...


class SteamUser(Protocol):
    public_ip: Optional[str]

    async def log_on(self, details: LogOnDetails) -> None:
        """Log into the low-level client; returns once logged on."""
        ...

    def on(self, event: str, handler: EventHandler) -> None: ...


@dataclass
class SteamClients:
    """The SDK clients owned by one bot."""
    user: SteamUser
    community: SteamCommunity
    manager: TradeOfferManager
    inventory: Optional[InventorySource] = None

    @property
    def inventory_source(self) -> InventorySource:
        return self.inventory if self.inventory is not None else self.manager

    def cookie_sinks(self) -> list[CookieSink]:
        sinks: list[CookieSink] = [self.manager]
        if self.inventory is not None and isinstance(self.inventory, CookieSink):
            sinks.append(self.inventory)
        return sinks
