"""
Provision a user from the command line.

There is no registration endpoint; accounts are created here.

Usage:
    python -m backend.auth_service.create_user alice
    python -m backend.auth_service.create_user alice --password 's3cret'
"""

import argparse
import getpass
import logging
import sys
from typing import List, Optional

import psycopg2.errors
from argon2 import PasswordHasher

from backend.auth_service.models import User
from backend.config import load_settings
from backend.database.queries import Database

logger = logging.getLogger(__name__)

ph = PasswordHasher()


def create_user(users, username: str, password: str) -> User:
    """
    Hash the password with Argon2 and insert the user.

    Args:
        users: The users table (query interface).
        username (str): Unique login name.
        password (str): Plain password; only its hash is stored.

    Returns:
        User: The stored record.
    """
    if not username or not password:
        raise ValueError("Username and password are required")
    return users.create({"username": username, "password": ph.hash(password)})


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(asctime)s - %(message)s")

    parser = argparse.ArgumentParser(description="Create a user who can log in to the API.")
    parser.add_argument("username")
    parser.add_argument("--password", help="Prompted for when omitted.")
    args = parser.parse_args(argv)

    password = args.password or getpass.getpass("Password: ")

    database = Database(load_settings().database_url)
    try:
        user = create_user(database.users, args.username, password)
    except psycopg2.errors.UniqueViolation:
        logger.error(f"User '{args.username}' already exists")
        return 1
    except ValueError as e:
        logger.error(str(e))
        return 1

    logger.info(f"Created user '{user.username}' with id {user.id}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
