"""Forwarder configuration: bot identities from YAML, timings from env."""
import logging
import os
import random
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

DEFAULT_APP_ID = 730
DEFAULT_CONTEXT_ID = 2


class ConfigError(Exception):
    """Configuration file error."""

    pass


class BotIdentity(BaseModel):
    """One managed account and where its items go."""

    model_config = ConfigDict(frozen=True)

    username: Annotated[str, Field(min_length=1)]
    password: Annotated[str, Field(min_length=1)]
    shared_secret: Annotated[str, Field(min_length=1)]
    identity_secret: Annotated[str, Field(min_length=1)]
    target: Union[str, tuple[str, ...]]
    proxy: Optional[str] = None
    app_id: int = DEFAULT_APP_ID
    context_id: int = DEFAULT_CONTEXT_ID

    @field_validator("target", mode="before")
    @classmethod
    def validate_target(cls, v: object) -> object:
        if isinstance(v, list):
            v = tuple(v)
        if isinstance(v, tuple):
            targets = tuple(str(t).strip() for t in v if str(t).strip())
            if not targets:
                raise ValueError("target list must not be empty")
            return targets
        if isinstance(v, str) and not v.strip():
            raise ValueError("target must not be empty")
        return v

    @field_validator("proxy", mode="before")
    @classmethod
    def validate_proxy(cls, v: object) -> object:
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        if isinstance(v, str) and "://" in v:
            raise ValueError("proxy must be host:port without a scheme")
        return v

    @property
    def tag(self) -> str:
        return f"[{self.username}]"

    @property
    def targets(self) -> tuple[str, ...]:
        return self.target if isinstance(self.target, tuple) else (self.target,)

    @property
    def proxy_url(self) -> Optional[str]:
        return f"http://{self.proxy}" if self.proxy else None

    def choose_recipient(self, rng: Optional[random.Random] = None) -> str:
        """Pick a recipient, uniformly at random when several are configured."""
        targets = self.targets
        if len(targets) == 1:
            return targets[0]
        return (rng or random).choice(targets)


@dataclass(frozen=True)
class Timings:
    """Wait intervals, in seconds unless noted."""

    login_retry_delay: float = 30.0
    login_cycle_delay: float = 60.0
    login_attempts: int = 3
    web_login_delay: float = 30.0
    guard_code_delay: float = 30.0
    recovery_interval: float = 60.0
    confirmation_interval: float = 10.0
    offer_cancel_time: float = 300.0


def _parse_float(name: str, default: float) -> float:
    """Read a float env var, warning and using *default* when unparsable."""
    raw = os.environ.get(name, "")
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Unparsable value %r for %s, using default %s.", raw, name, default)
        return default
    if value < 0:
        logger.warning("Negative value %r for %s, using default %s.", raw, name, default)
        return default
    return value


def load_timings_from_env() -> Timings:
    d = Timings()
    return Timings(
        login_retry_delay=_parse_float("FORWARDER_LOGIN_RETRY_DELAY", d.login_retry_delay),
        login_cycle_delay=_parse_float("FORWARDER_LOGIN_CYCLE_DELAY", d.login_cycle_delay),
        login_attempts=int(_parse_float("FORWARDER_LOGIN_ATTEMPTS", d.login_attempts)) or d.login_attempts,
        web_login_delay=_parse_float("FORWARDER_WEB_LOGIN_DELAY", d.web_login_delay),
        guard_code_delay=_parse_float("FORWARDER_GUARD_CODE_DELAY", d.guard_code_delay),
        recovery_interval=_parse_float("FORWARDER_RECOVERY_INTERVAL", d.recovery_interval),
        confirmation_interval=_parse_float("FORWARDER_CONFIRMATION_INTERVAL", d.confirmation_interval),
        offer_cancel_time=_parse_float("FORWARDER_OFFER_CANCEL_TIME", d.offer_cancel_time),
    )


def load_bots(path: Path) -> list[BotIdentity]:
    """Load bot identities from a YAML file.

    The file holds either a list of bot entries or a mapping with a
    ``bots`` key. Raises ConfigError when missing or invalid.
    """
    if not path.exists():
        raise ConfigError(f"Config not found at {path}")
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if isinstance(data, dict):
        data = data.get("bots")
    if not data or not isinstance(data, list):
        raise ConfigError(f"No bots configured in {path}")

    bots = []
    for i, entry in enumerate(data):
        if not isinstance(entry, dict):
            raise ConfigError(f"Bot entry #{i + 1} in {path} is not a mapping")
        try:
            bots.append(BotIdentity(**entry))
        except ValidationError as e:
            name = entry.get("username") or f"#{i + 1}"
            raise ConfigError(f"Invalid bot entry {name} in {path}: {e}") from e

    names = [b.username for b in bots]
    duplicates = sorted({n for n in names if names.count(n) > 1})
    if duplicates:
        raise ConfigError(f"Duplicate usernames in {path}: {', '.join(duplicates)}")
    return bots
