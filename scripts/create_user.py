"""Create a user directly in the SQL store (DATABASE_BACKEND=sql).

Usage:
    python -m scripts.create_user <username> <email> [password]
If password is omitted, a random one is printed.
"""

import asyncio
import secrets
import sys

from accounts.application.dtos.user import UserCreate
from accounts.core.config import get_settings
from accounts.domain.exceptions import AccountServiceException
from accounts.infrastructure.persistence import database
from accounts.infrastructure.persistence.repositories import SqlUserRepository
from accounts.infrastructure.security.password import get_password_hash


async def main() -> None:
    """Create one active user; tables are created first if missing."""
    if len(sys.argv) < 3:
        print(
            "Usage: python -m scripts.create_user <username> <email> [password]",
            file=sys.stderr,
        )
        sys.exit(1)
    username, email = sys.argv[1], sys.argv[2]
    password = sys.argv[3] if len(sys.argv) > 3 else secrets.token_urlsafe(12)

    settings = get_settings()
    session_factory = database.get_session_factory(settings)
    await database.create_tables(database.engine)
    repo = SqlUserRepository(session_factory)
    try:
        user = await repo.create_user(
            UserCreate(username=username, password=password, email=email),
            get_password_hash(password),
        )
    except AccountServiceException as e:
        print(f"Could not create user: {e.message}", file=sys.stderr)
        sys.exit(1)
    finally:
        await database.dispose_engine()
    print(f"Created user: {user.id} ({user.username})")
    print(f"Password: {password}")


if __name__ == "__main__":
    asyncio.run(main())
