"""Item forwarder core: session recovery, offer dispatch and recovery scans."""
from src.forwarder.bot import Bot
from src.forwarder.config import BotIdentity, ConfigError, Timings, load_bots, load_timings_from_env
from src.forwarder.dispatcher import OfferDispatcher, batch_size, chunk
from src.forwarder.flag import RecoveryFlag
from src.forwarder.incoming import IncomingOfferHandler, accept_retry_wait, status_name
from src.forwarder.log import BotLogger, configure_logging, redact
from src.forwarder.recovery import RecoveryLoop
from src.forwarder.runner import ClientFactory, FactoryError, build_bot, load_factory, run_bots
from src.forwarder.session import SessionManager

__all__ = [
    "Bot", "BotIdentity", "ConfigError", "Timings", "load_bots", "load_timings_from_env",
    "OfferDispatcher", "batch_size", "chunk", "RecoveryFlag",
    "IncomingOfferHandler", "accept_retry_wait", "status_name", "BotLogger", "configure_logging", "redact",
    "RecoveryLoop", "ClientFactory", "FactoryError", "build_bot", "load_factory", "run_bots", "SessionManager",
]
