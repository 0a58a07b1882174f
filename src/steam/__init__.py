"""Steam client layer: SDK interfaces, platform types and Steam Guard codes."""

from .exceptions import (ExchangeFailedError, ExchangePendingError, InvalidSecretError, InventoryError, LoginError,
                         SteamError, TradeError, TransientSteamError, is_accept_conflict, is_offer_limit, is_transient,
                         requires_mobile_confirmation)
from .guard import AuthCodeProvider, generate_auth_code
from .inventory import CommunityInventory, steam_id_from_cookies
from .protocols import CookieSink, InventorySource, SteamClients, SteamCommunity, SteamUser, TradeOffer, TradeOfferManager
from .types import ExchangeDetails, ExchangeItem, Item, LogOnDetails, OfferFilter, OfferState, TradeStatus

__all__ = [
    "SteamError", "LoginError", "InvalidSecretError", "TransientSteamError", "TradeError", "InventoryError",
    "ExchangeFailedError", "ExchangePendingError",
    "is_transient", "is_offer_limit", "is_accept_conflict", "requires_mobile_confirmation",
    "AuthCodeProvider", "generate_auth_code",
    "CommunityInventory", "steam_id_from_cookies",
    "CookieSink", "InventorySource", "SteamClients", "SteamCommunity", "SteamUser", "TradeOffer", "TradeOfferManager",
    "ExchangeDetails", "ExchangeItem", "Item", "LogOnDetails", "OfferFilter", "OfferState", "TradeStatus",
]
