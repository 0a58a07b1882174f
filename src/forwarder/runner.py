"""Running every configured bot in one event loop."""
import asyncio
import importlib
import logging
from typing import Callable, Optional

from src.forwarder.bot import Bot
from src.forwarder.config import BotIdentity, Timings
from src.steam.protocols import SteamClients

logger = logging.getLogger(__name__)

ClientFactory = Callable[[BotIdentity, Timings], SteamClients]


class FactoryError(Exception):
    """Client factory import path could not be resolved."""


def load_factory(path: str) -> ClientFactory:
    """Resolve ``package.module:attribute`` to a client factory."""
    module_name, sep, attr = path.partition(":")
    if not sep or not module_name or not attr:
        raise FactoryError(f"Factory must look like 'package.module:attribute', got {path!r}")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise FactoryError(f"Cannot import {module_name!r}: {e}") from e
    factory = getattr(module, attr, None)
    if factory is None or not callable(factory):
        raise FactoryError(f"{path!r} is not a callable")
    return factory


def build_bot(identity: BotIdentity, factory: ClientFactory, timings: Timings) -> Optional[Bot]:
    """Create the clients and the bot for one account; None when the factory fails."""
    try:
        return Bot(identity, factory(identity, timings), timings=timings)
    except Exception as e:
        logger.exception("%s Could not create Steam clients: %s", identity.tag, e)
        return None


async def start_bot(bot: Bot) -> bool:
    try:
        await bot.start()
    except Exception as e:
        logger.exception("%s Bot failed to start: %s", bot.identity.tag, e)
        return False
    return True


async def run_bots(
    identities: list[BotIdentity],
    factory: ClientFactory,
    timings: Optional[Timings] = None,
    forever: bool = True,
) -> list[Bot]:
    """Build and start one bot per identity, each independent of the others.

    With ``forever`` the coroutine keeps the loop alive after startup; the
    process runs until it is killed. Returns the bots whose clients could
    be created.
    """
    timings = timings or Timings()
    built = (build_bot(identity, factory, timings) for identity in identities)
    bots = [b for b in built if b is not None]
    results = await asyncio.gather(*(start_bot(b) for b in bots))
    logger.info("%d of %d bots started", sum(results), len(identities))
    if forever:
        try:
            await asyncio.Event().wait()
        finally:
            for bot in bots:
                bot.stop()
    return bots
