#!/usr/bin/env python3
from __future__ import annotations

from getpass import getpass

from dotenv import load_dotenv

from gatepage.auth.flow import AuthFlow, Err
from gatepage.auth.passwords import build_hasher
from gatepage.auth.session import SessionTokens
from gatepage.auth.users import open_store
from gatepage.config import Settings


def main() -> None:
    load_dotenv()
    settings = Settings.from_env()
    flow = AuthFlow(
        open_store(settings.database_url),
        SessionTokens(settings.secret_key, ttl_seconds=settings.session_ttl_seconds),
        build_hasher(settings.hash_time_cost),
    )

    name = input("Name: ").strip()
    email = input("Email: ").strip()
    pw1 = getpass("Password: ")
    pw2 = getpass("Repeat password: ")
    if pw1 != pw2:
        raise SystemExit("Passwords do not match")

    result = flow.register(name=name, email=email, password=pw1)
    if isinstance(result, Err):
        raise SystemExit(result.error.message)
    print(f"OK -> {email} ({settings.database_url})")


if __name__ == "__main__":
    main()
