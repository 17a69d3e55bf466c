"""Create an account from the command line (e.g. the first admin).

Usage:
    python scripts/create_user.py --username admin --email admin@example.com --role admin
"""
import argparse
import asyncio
import getpass
import sys
from datetime import timedelta
from pathlib import Path

# Ensure project root is on path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from user_accounts.config import get_settings
from user_accounts.database import async_session_maker, close_db, init_db
from user_accounts.kernel.events.event_store import EventStore
from user_accounts.kernel.identity import (
    AccountService,
    ConfigurationError,
    PasswordHasher,
    RegistrationFailed,
    SqlAlchemyCredentialStore,
    TokenIssuer,
    ValidationError,
)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Register a user account.")
    parser.add_argument("--username", required=True)
    parser.add_argument("--email", required=True)
    parser.add_argument("--role", default="student", choices=["student", "instructor", "admin"])
    parser.add_argument("--password", help="Prompted for when omitted")
    return parser.parse_args(argv)


async def create_user(args: argparse.Namespace) -> int:
    settings = get_settings()
    try:
        secret = settings.require_jwt_secret()
    except ConfigurationError as e:
        print(f"FAIL: {e.message}")
        return 1

    await init_db()
    try:
        async with async_session_maker() as session:
            accounts = AccountService(
                store=SqlAlchemyCredentialStore(session),
                hasher=PasswordHasher(rounds=settings.bcrypt_rounds),
                issuer=TokenIssuer(secret, settings.jwt_algorithm),
                token_ttl=timedelta(minutes=settings.access_token_expire_minutes),
                event_store=EventStore(session),
            )
            try:
                result = await accounts.register(
                    username=args.username,
                    email=args.email,
                    password=args.password,
                    role=args.role,
                )
            except ValidationError as e:
                print(f"FAIL: {e.message}: {', '.join(e.fields)}")
                return 1
            except RegistrationFailed as e:
                print(f"FAIL: {e.message} (is the email already registered?)")
                return 1
    finally:
        await close_db()

    print(f"Created {args.role} {args.email} (id: {result.user_id})")
    return 0


def main(argv=None) -> int:
    args = parse_args(argv)
    if not args.password:
        args.password = getpass.getpass("Password: ")
    return asyncio.run(create_user(args))


if __name__ == "__main__":
    sys.exit(main())
