# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from typing import Optional

from argon2 import PasswordHasher
from argon2.exceptions import VerifyMismatchError

DEFAULT_TIME_COST = 3

_PH = PasswordHasher(time_cost=DEFAULT_TIME_COST)


def build_hasher(time_cost: int = DEFAULT_TIME_COST) -> PasswordHasher:
    if time_cost < 1:
        raise ValueError("time_cost must be >= 1")
    return PasswordHasher(time_cost=time_cost)


def hash_password(plain: str, hasher: Optional[PasswordHasher] = None) -> str:
    if not plain:
        raise ValueError("Empty password")
    return (hasher or _PH).hash(plain)


def verify_password(hash_value: str, plain: str, hasher: Optional[PasswordHasher] = None) -> bool:
    # A malformed hash_value raises argon2.exceptions.InvalidHashError.
    if not hash_value or not plain:
        return False
    try:
        return (hasher or _PH).verify(hash_value, plain)
    except VerifyMismatchError:
        return False
