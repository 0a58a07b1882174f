"""Login and session recovery for one managed account."""
import asyncio
from typing import Awaitable, Callable, Optional

from src.forwarder.config import BotIdentity, Timings
from src.forwarder.log import BotLogger, bot_logger
from src.forwarder.tasks import BackgroundTasks
from src.steam.exceptions import LoginError, SteamError, requires_mobile_confirmation
from src.steam.guard import AuthCodeProvider, generate_auth_code
from src.steam.protocols import CookieSink, SteamCommunity, SteamUser
from src.steam.types import LogOnDetails

Sleep = Callable[[float], Awaitable[None]]


class SessionManager:
    """Owns the low-level client logon and the community web session.

    Both logons retry forever in cycles of ``login_attempts`` tries. The web
    session has no known TTL; expiry arrives as a ``sessionExpired``
    event whose handler is :meth:`on_session_expired`. Only one web login
    recovery chain runs at a time.
    """

    def __init__(
        self,
        identity: BotIdentity,
        user: SteamUser,
        community: SteamCommunity,
        cookie_sinks: list[CookieSink],
        timings: Optional[Timings] = None,
        code_provider: AuthCodeProvider = generate_auth_code,
        sleep: Sleep = asyncio.sleep,
        log: Optional[BotLogger] = None,
    ) -> None:
        self._identity = identity
        self._user = user
        self._community = community
        self._cookie_sinks = cookie_sinks
        self._timings = timings or Timings()
        self._code_provider = code_provider
        self._sleep = sleep
        self._log = log or bot_logger(__name__, identity.tag)
        self._tasks = BackgroundTasks(self._log)
        self._retrying = False
        self._cookies: Optional[list[str]] = None

    @property
    def cookies(self) -> Optional[list[str]]:
        return self._cookies

    @property
    def is_retrying(self) -> bool:
        return self._retrying

    @property
    def tasks(self) -> BackgroundTasks:
        return self._tasks

    def _details(self) -> LogOnDetails:
        code = self._code_provider(self._identity.shared_secret)
        self._log.info('Using 2FA code "%s".', code)
        return LogOnDetails(account_name=self._identity.username, password=self._identity.password,
                            two_factor_code=code)

    async def login_client(self) -> None:
        """Log into the low-level client, answering guard-code requests.

        Rejected logons are retried like web logins and never give up.
        """
        self._user.on("steamGuard", self._on_steam_guard)
        await self._retry_cycles(self._log_on_client, "Logging into Steam client...")
        self._log.info("Logged into Steam client with IP %s!", self._user.public_ip)

    async def _log_on_client(self) -> None:
        await self._user.log_on(self._details())

    def _on_steam_guard(self, domain: Optional[str], callback: Callable[[str], None]) -> None:
        self._tasks.spawn(self._provide_new_code(callback), name=f"guard-code-{self._identity.username}")

    async def _provide_new_code(self, callback: Callable[[str], None]) -> None:
        self._log.info("Invalid 2FA code. Waiting %ss before generating new one...",
                       int(self._timings.guard_code_delay))
        await self._sleep(self._timings.guard_code_delay)
        code = self._code_provider(self._identity.shared_secret)
        self._log.info('New code generated: "%s"', code)
        callback(code)

    async def login(self) -> list[str]:
        """Log into the community website. Raises LoginError on rejection."""
        details = self._details()
        try:
            return await self._community.login(details)
        except LoginError:
            raise
        except SteamError as e:
            raise LoginError(str(e), e.eresult) from e

    async def _install_cookies(self, cookies: list[str]) -> None:
        for sink in self._cookie_sinks:
            await sink.set_cookies(cookies)
        self._cookies = cookies

    async def _web_login(self) -> None:
        await self._install_cookies(await self.login())

    async def retry_login(self) -> bool:
        """Log in until it works. Returns False when a retry was already running."""
        if self._retrying:
            self._log.debug("Login retry already in progress")
            return False
        self._retrying = True
        try:
            await self._retry_cycles(self._web_login, "Logging into Steam Community website...")
            self._log.info("Successfully logged in!")
            return True
        finally:
            self._retrying = False

    async def _retry_cycles(self, attempt: Callable[[], Awaitable[None]], banner: str) -> None:
        while True:
            self._log.info(banner)
            if await self._attempt_cycle(attempt):
                return
            self._log.warning("Can't login to account! Waiting %ss before trying again...",
                              int(self._timings.login_cycle_delay))
            await self._sleep(self._timings.login_cycle_delay)

    async def _attempt_cycle(self, attempt: Callable[[], Awaitable[None]]) -> bool:
        for _ in range(self._timings.login_attempts):
            try:
                await attempt()
                return True
            except Exception as e:
                if requires_mobile_confirmation(e):
                    self._log.warning("%s", e)
                else:
                    self._log.warning("%s: %s", type(e).__name__, e)
            await self._sleep(self._timings.login_retry_delay)
        return False

    def on_session_expired(self, *args: object) -> None:
        self._log.info("Web session expired")
        self._tasks.spawn(self.retry_login(), name=f"retry-login-{self._identity.username}")
