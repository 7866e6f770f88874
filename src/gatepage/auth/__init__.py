# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Authentication building blocks.

This package provides:
- Password hashing/verification (argon2)
- User documents and the credential stores (YAML file, in-memory)
- Signed, time-limited session tokens (itsdangerous)
- The auth flow tying them together (register, login, verify)
"""
