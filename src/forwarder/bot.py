"""One managed account: its clients, session and offer handling."""
import asyncio
import random
from typing import Awaitable, Callable, Optional

from src.forwarder.config import BotIdentity, Timings
from src.forwarder.dispatcher import OfferDispatcher
from src.forwarder.flag import RecoveryFlag
from src.forwarder.incoming import IncomingOfferHandler
from src.forwarder.log import bot_logger
from src.forwarder.recovery import RecoveryLoop
from src.forwarder.session import SessionManager
from src.steam.guard import AuthCodeProvider, generate_auth_code
from src.steam.protocols import SteamClients

Sleep = Callable[[float], Awaitable[None]]

SUPPRESSED_DEBUG = "Checking confirmations"


class Bot:
    """Wires the forwarder components for a single account.

    Nothing here is shared with other bots: each instance owns its clients,
    recovery flag, random generator and background tasks.
    """

    def __init__(
        self,
        identity: BotIdentity,
        clients: SteamClients,
        timings: Optional[Timings] = None,
        code_provider: AuthCodeProvider = generate_auth_code,
        sleep: Sleep = asyncio.sleep,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.identity = identity
        self.clients = clients
        self.timings = timings or Timings()
        self._sleep = sleep
        self.log = bot_logger(__name__, identity.tag)
        self.flag = RecoveryFlag(initial=True, logger=self.log)
        self.session = SessionManager(
            identity, clients.user, clients.community, clients.cookie_sinks(),
            timings=self.timings, code_provider=code_provider, sleep=sleep, log=self.log,
        )
        self.dispatcher = OfferDispatcher(identity, clients.manager, self.flag, rng=rng, log=self.log)
        self.incoming = IncomingOfferHandler(identity, self.dispatcher, self.flag, sleep=sleep, log=self.log)
        self.recovery = RecoveryLoop(
            identity, clients.inventory_source, self.dispatcher, self.flag,
            timings=self.timings, sleep=sleep, log=self.log,
        )
        self._started = False

    @property
    def started(self) -> bool:
        return self._started

    async def start(self) -> None:
        """Log in, subscribe to client events and start the recovery loop."""
        await self.session.login_client()
        self.log.info("Waiting %ss before logging into Steam Community website...",
                      int(self.timings.web_login_delay))
        await self._sleep(self.timings.web_login_delay)
        await self.session.retry_login()

        community = self.clients.community
        community.on("debug", self._on_debug)
        community.on("sessionExpired", self.session.on_session_expired)
        community.start_confirmation_checker(int(self.timings.confirmation_interval * 1000),
                                             self.identity.identity_secret)
        self.clients.manager.on("newOffer", self.incoming.on_new_offer)
        self.recovery.start()
        self._started = True

    def stop(self) -> None:
        """Stop the recovery loop. Client sessions are left to the SDK."""
        self.recovery.stop()
        self._started = False

    def _on_debug(self, message: str) -> None:
        if message == SUPPRESSED_DEBUG:
            return
        self.log.info("%s", message)
