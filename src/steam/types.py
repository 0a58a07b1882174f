"""Type definitions and enums shared with the Steam client SDKs."""

from dataclasses import dataclass, field
from enum import Enum, IntEnum


class TradeStatus(IntEnum):
    INIT = 0
    PRE_COMMITTED = 1
    COMMITTED = 2
    COMPLETE = 3
    FAILED = 4
    PARTIAL_SUPPORT_ROLLBACK = 5
    FULL_SUPPORT_ROLLBACK = 6
    SUPPORT_ROLLBACK_SELECTIVE = 7
    ROLLBACK_FAILED = 8
    ROLLBACK_ABANDONED = 9
    IN_ESCROW = 10
    ESCROW_ROLLBACK = 11


class OfferFilter(IntEnum):
    ACTIVE_ONLY = 1
    HISTORICAL_ONLY = 2
    ALL = 3


class OfferState(str, Enum):
    """Lifecycle of an incoming offer as seen by the forwarder."""
    OBSERVED = "observed"
    DECLINED = "declined"
    ACCEPTING = "accepting"
    ACCEPTED = "accepted"
    ACCEPT_FAILED = "accept_failed"
    DETAILS_PENDING = "details_pending"
    DETAILS_RESOLVED = "details_resolved"
    FORWARDED = "forwarded"
    FORWARD_ABANDONED = "forward_abandoned"


@dataclass(frozen=True)
class Item:
    """An inventory item, identified by its namespace pair and asset id."""
    appid: int
    contextid: int
    assetid: str


@dataclass(frozen=True)
class ExchangeItem:
    """A received item after the exchange has settled."""
    appid: int
    contextid: int
    assetid: str
    new_assetid: str
    new_contextid: int | None = None


@dataclass(frozen=True)
class ExchangeDetails:
    status: TradeStatus
    received: list[ExchangeItem] = field(default_factory=list)


@dataclass(frozen=True)
class LogOnDetails:
    account_name: str
    password: str
    two_factor_code: str
