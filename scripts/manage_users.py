#!/usr/bin/env python3
"""
Script to manage users directly against the document store.

Usage:
    python scripts/manage_users.py create alice --first-name Alice
    python scripts/manage_users.py list
    python scripts/manage_users.py delete alice
"""

import argparse
import asyncio
import getpass
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from planner.auth import PasswordHandler, UserStore, validate_signup
from planner.config import load_config
from planner.errors import ValidationError
from planner.storage import DocumentStore


def open_store(data_dir: str = None) -> UserStore:
    config = load_config()
    store = DocumentStore(Path(data_dir) if data_dir else config.storage.data_dir)
    return UserStore(store, PasswordHandler(rounds=config.auth.bcrypt_rounds))


async def create(users: UserStore, args) -> int:
    username = args.username or input("Username: ")

    password = getpass.getpass("Enter password: ")
    confirm = getpass.getpass("Confirm password: ")
    if password != confirm:
        print("❌ Passwords do not match!")
        return 1

    try:
        fields = validate_signup({
            "username": username,
            "password": password,
            "firstName": args.first_name or "",
            "lastName": args.last_name or "",
        })
        user = await users.create_user(**fields)
    except ValidationError as e:
        print(f"❌ {e.location}: {e.message}")
        return 1

    print()
    print("✅ User created successfully!")
    print(f"   Username: {user.username}")
    print(f"   User ID: {user.user_id}")
    if user.first_name or user.last_name:
        print(f"   Name: {user.first_name} {user.last_name}".rstrip())
    return 0


async def list_all(users: UserStore, args) -> int:
    for user in await users.list_users():
        print(f"{user.user_id}  {user.username}  {user.first_name} {user.last_name}".rstrip())
    return 0


async def delete(users: UserStore, args) -> int:
    if not await users.delete_user(args.username):
        print(f"❌ User {args.username} not found!")
        return 1
    print(f"✅ Deleted user {args.username}")
    return 0


def main():
    parser = argparse.ArgumentParser(description="Manage Planner users")
    parser.add_argument("--data-dir", help="Directory holding the JSON collections")
    sub = parser.add_subparsers(dest="command", required=True)

    create_parser = sub.add_parser("create", help="Create a user")
    create_parser.add_argument("username", nargs="?", help="Username")
    create_parser.add_argument("--first-name", "-f", help="User's first name")
    create_parser.add_argument("--last-name", "-l", help="User's last name")
    create_parser.set_defaults(handler=create)

    list_parser = sub.add_parser("list", help="List users")
    list_parser.set_defaults(handler=list_all)

    delete_parser = sub.add_parser("delete", help="Delete a user")
    delete_parser.add_argument("username", help="Username")
    delete_parser.set_defaults(handler=delete)

    args = parser.parse_args()
    users = open_store(args.data_dir)
    sys.exit(asyncio.run(args.handler(users, args)))


if __name__ == "__main__":
    main()
