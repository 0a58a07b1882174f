"""Exception types and error classifiers for the Steam client layer."""

# EResult codes the forwarder reacts to.
ERESULT_FAIL = 2
ERESULT_TIMEOUT = 16
ERESULT_LIMIT_EXCEEDED = 25


class SteamError(Exception):
    """Base exception for all Steam client errors."""
    def __init__(self, message: str, eresult: int | None = None) -> None:
        super().__init__(message)
        self.eresult = eresult


class LoginError(SteamError):
    """Web or client login was rejected."""
    pass


class InvalidSecretError(SteamError):
    """Shared secret could not be decoded."""
    pass


class TransientSteamError(SteamError):
    """Temporary platform failure (rate limit, momentary outage)."""
    pass


class TradeError(SteamError):
    """A trade offer operation failed."""
    pass


class InventoryError(SteamError):
    """Inventory could not be read."""
    pass


class ExchangeFailedError(SteamError):
    """Exchange details report a definite failure."""
    def __init__(self, message: str, status: int) -> None:
        super().__init__(message)
        self.status = status


class ExchangePendingError(SteamError):
    """Exchange was still processing after every poll."""
    def __init__(self, message: str, status: int) -> None:
        super().__init__(message)
        self.status = status


def is_transient(err: BaseException) -> bool:
    """True for errors worth retrying later without escalation."""
    if isinstance(err, TransientSteamError):
        return True
    if isinstance(err, SteamError) and err.eresult == ERESULT_FAIL:
        return True
    return "Failure" in str(err)


def is_offer_limit(err: BaseException) -> bool:
    """True when a send hit the outstanding-offer ceiling."""
    if isinstance(err, SteamError) and err.eresult == ERESULT_LIMIT_EXCEEDED:
        return True
    return "too many trade offers" in str(err).lower()


def is_accept_conflict(err: BaseException) -> bool:
    """True for the accept failure that needs the long 15 minute wait."""
    if isinstance(err, SteamError) and err.eresult == ERESULT_TIMEOUT:
        return True
    return f"({ERESULT_TIMEOUT})" in str(err)


def requires_mobile_confirmation(err: BaseException) -> bool:
    return "SteamGuardMobile" in str(err)
