# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import threading
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import List, Optional, Protocol, Tuple

import yaml

from gatepage.errors import UnexpectedStoreError


@dataclass(frozen=True)
class User:
    name: str
    email: str
    password_hash: str


class UserStore(Protocol):
    """Credential store. Uniqueness of ``email`` is NOT enforced here."""

    def find_by_email(self, email: str) -> Optional[User]: ...

    def insert(self, user: User) -> None: ...


class MemoryUserStore:
    def __init__(self, users: Optional[List[User]] = None) -> None:
        self._users: List[User] = list(users or [])
        self._lock = threading.Lock()

    def find_by_email(self, email: str) -> Optional[User]:
        with self._lock:
            for u in self._users:
                if u.email == email:
                    return u
        return None

    def insert(self, user: User) -> None:
        with self._lock:
            self._users.append(user)

    def all(self) -> List[User]:
        with self._lock:
            return list(self._users)


def _parse_users(raw) -> List[User]:
    docs = (raw.get("users") or []) if isinstance(raw, dict) else []
    out: List[User] = []
    for doc in docs:
        if not isinstance(doc, dict):
            continue
        email = str(doc.get("email") or "").strip()
        if not email:
            continue
        out.append(
            User(
                name=str(doc.get("name") or ""),
                email=email,
                password_hash=str(doc.get("password_hash") or "").strip(),
            )
        )
    return out


class YamlUserStore:
    """User documents kept as a list under ``users:`` in a YAML file.

    The file is re-read whenever its mtime changes. The lock only serialises
    rewrites of the file within this process.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path).resolve()
        self._lock = threading.Lock()
        self._cache: Tuple[float, List[User]] = (0.0, [])

    def _load(self) -> List[User]:
        try:
            if not self.path.exists():
                return []
            mtime = self.path.stat().st_mtime
            cached_mtime, cached_users = self._cache
            if mtime and mtime == cached_mtime:
                return cached_users
            raw = yaml.safe_load(self.path.read_text(encoding="utf-8")) or {}
        except (OSError, yaml.YAMLError) as e:
            raise UnexpectedStoreError(code="store_read_failed") from e
        users = _parse_users(raw)
        self._cache = (mtime, users)
        return users

    def find_by_email(self, email: str) -> Optional[User]:
        for u in self._load():
            if u.email == email:
                return u
        return None

    def insert(self, user: User) -> None:
        with self._lock:
            users = list(self._load())
            users.append(user)
            doc = {"version": 1, "users": [asdict(u) for u in users]}
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                tmp = self.path.with_suffix(self.path.suffix + ".tmp")
                tmp.write_text(yaml.safe_dump(doc, sort_keys=False, allow_unicode=True), encoding="utf-8")
                tmp.replace(self.path)
            except (OSError, yaml.YAMLError) as e:
                raise UnexpectedStoreError(code="store_write_failed") from e
            # Same-second rewrites can keep the mtime, so refresh the cache directly.
            self._cache = (self.path.stat().st_mtime, users)


def open_store(url: str) -> UserStore:
    """Resolve a database URL to a store.

    ``memory://`` -> MemoryUserStore; ``yaml://<path>`` or a bare ``*.yml``/``*.yaml``
    path -> YamlUserStore.
    """
    u = (url or "").strip()
    if u.startswith("memory://"):
        return MemoryUserStore()
    if u.startswith("yaml://"):
        path = u[len("yaml://"):]
        if not path:
            raise ValueError(f"Missing file path in database URL: {url!r}")
        return YamlUserStore(Path(path))
    if "://" not in u and u.lower().endswith((".yml", ".yaml")):
        return YamlUserStore(Path(u))
    raise ValueError(f"Unsupported database URL: {url!r}")
