from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Literal

from passgate.core.errors import InvalidSecretError
from passgate.core.keys import decode_secret
from passgate.models.password_policy import PasswordPolicy
from passgate.models.tokens import (
    DEFAULT_ACCESS_TOKEN_DURATION,
    DEFAULT_REFRESH_TOKEN_DURATION,
)

AppEnv = Literal["dev", "test", "prod"]
LogLevel = Literal["debug", "info", "warning", "error"]

_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off")


def _getenv(name: str, default: str) -> str:
    return os.environ.get(name, default).strip()


def _getbool(name: str, default: bool) -> bool:
    raw = _getenv(name, "").lower()
    if not raw:
        return default
    if raw in _TRUE:
        return True
    if raw in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean (got {raw!r})")


def _getint(name: str, default: int, *, minimum: int = 1) -> int:
    raw = _getenv(name, "")
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer (got {raw!r})") from None
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum} (got {value})")
    return value


def _getsecret(name: str) -> str:
    raw = _getenv(name, "")
    if not raw:
        raise ValueError(f"Missing {name} environment variable")
    try:
        decode_secret(raw)
    except InvalidSecretError as e:
        raise ValueError(f"Invalid {name} environment variable: {e}") from None
    return raw


@dataclass(frozen=True)
class Settings:
    app_env: AppEnv
    log_level: LogLevel
    log_json: bool
    port: int
    pwd_secret: str
    token_secrets: tuple[str, ...]
    access_token_duration: int
    refresh_token_duration: int
    password_policy: PasswordPolicy

    @property
    def is_dev(self) -> bool:
        return self.app_env == "dev"

    @property
    def is_test(self) -> bool:
        return self.app_env == "test"

    @property
    def is_prod(self) -> bool:
        return self.app_env == "prod"


def load_password_policy() -> PasswordPolicy:
    defaults = PasswordPolicy()
    return PasswordPolicy(
        length=_getint("PWD_AUTO_LENGTH", defaults.length),
        numbers=_getbool("PWD_AUTO_NUMBERS", defaults.numbers),
        uppercase=_getbool("PWD_AUTO_UPPERCASE", defaults.uppercase),
        lowercase=_getbool("PWD_AUTO_LOWERCASE", defaults.lowercase),
        symbols=_getbool("PWD_AUTO_SYMBOLS", defaults.symbols),
        strict=_getbool("PWD_AUTO_STRICT", defaults.strict),
        exclude_similar_chars=_getbool(
            "PWD_AUTO_EXCLUDE_SIMILAR_CHARS", defaults.exclude_similar_chars
        ),
    )


def load_settings() -> Settings:
    """Resolve every setting from the environment.

    Raises ValueError on anything missing or malformed.  Secrets are
    required: there is no safe default for a signing key.
    """
    app_env_raw = _getenv("APP_ENV", "dev").lower()
    log_level_raw = _getenv("LOG_LEVEL", "info").lower()
    port_raw = _getenv("PORT", "8000")

    if app_env_raw not in ("dev", "test", "prod"):
        raise ValueError(f"APP_ENV must be dev|test|prod (got {app_env_raw!r})")

    if log_level_raw not in ("debug", "info", "warning", "error"):
        raise ValueError(
            f"LOG_LEVEL must be debug|info|warning|error (got {log_level_raw!r})"
        )

    try:
        port = int(port_raw)
    except ValueError:
        raise ValueError(f"PORT must be an integer (got {port_raw!r})") from None

    pwd_secret = _getsecret("PWD_SECRET")

    # TOKEN_SECRET may hold several comma-separated keys; tokens carry the
    # index of the key that signed them in their "kid" header.
    token_raw = _getenv("TOKEN_SECRET", "")
    if not token_raw:
        raise ValueError("Missing TOKEN_SECRET environment variable")
    token_secrets = tuple(s.strip() for s in token_raw.split(","))
    for secret in token_secrets:
        try:
            decode_secret(secret)
        except InvalidSecretError as e:
            raise ValueError(
                f"Invalid TOKEN_SECRET environment variable: {e}"
            ) from None

    return Settings(  # type: ignore[arg-type]
        app_env=app_env_raw,
        log_level=log_level_raw,
        log_json=_getbool("LOG_JSON", False),
        port=port,
        pwd_secret=pwd_secret,
        token_secrets=token_secrets,
        access_token_duration=_getint(
            "ACCESS_TOKEN_DURATION", DEFAULT_ACCESS_TOKEN_DURATION
        ),
        refresh_token_duration=_getint(
            "REFRESH_TOKEN_DURATION", DEFAULT_REFRESH_TOKEN_DURATION
        ),
        password_policy=load_password_policy(),
    )


# Resolved once; a bad environment stops the process at import time.
SETTINGS = load_settings()
