# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

# Only used when no secret is configured. Anyone who reads this file can forge sessions.
INSECURE_DEFAULT_SECRET = "d5aa7adeccbb836386b6f5e6c58264bb"

_TRUTHY = {"1", "true", "yes", "y"}


def _first(env: Mapping[str, str], *names: str, default: str = "") -> str:
    for name in names:
        value = (env.get(name) or "").strip()
        if value:
            return value
    return default


@dataclass(frozen=True)
class Settings:
    host: str = "0.0.0.0"
    port: int = 3000
    database_url: str = "yaml://data/users.yml"
    secret_key: str = INSECURE_DEFAULT_SECRET
    session_ttl_seconds: int = 3600
    cookie_secure: bool = False
    hash_time_cost: int = 3
    log_level: str = "INFO"
    log_file: Optional[str] = None
    reload: bool = False

    @property
    def uses_default_secret(self) -> bool:
        return self.secret_key == INSECURE_DEFAULT_SECRET

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if env is None else env
        return cls(
            host=_first(env, "GATEPAGE_HOST", default=cls.host),
            port=int(_first(env, "GATEPAGE_PORT", "PORT", default=str(cls.port))),
            database_url=_first(env, "GATEPAGE_DATABASE_URL", "DATABASE_URL", default=cls.database_url),
            secret_key=_first(env, "GATEPAGE_SECRET_KEY", "SECRET_KEY", default=INSECURE_DEFAULT_SECRET),
            session_ttl_seconds=int(_first(env, "GATEPAGE_SESSION_TTL", default=str(cls.session_ttl_seconds))),
            cookie_secure=_first(env, "GATEPAGE_COOKIE_SECURE", default="false").lower() in _TRUTHY,
            hash_time_cost=int(_first(env, "GATEPAGE_HASH_TIME_COST", default=str(cls.hash_time_cost))),
            log_level=_first(env, "GATEPAGE_LOG_LEVEL", "LOG_LEVEL", default=cls.log_level).upper(),
            log_file=_first(env, "GATEPAGE_LOG_FILE") or None,
            reload=_first(env, "GATEPAGE_RELOAD", default="false").lower() in _TRUTHY,
        )
