"""
User storage and management.

Users live in the "users" collection of the document store. The
username is the natural key and is unique across the collection.
"""

import logging
from dataclasses import dataclass, asdict, field
from typing import List, Optional

from ..errors import DuplicateKeyError, ValidationError
from ..storage import DocumentStore, new_id, utc_now
from .password import PasswordHandler

logger = logging.getLogger(__name__)

USERS_COLLECTION = "users"


@dataclass
class User:
    """User data model."""
    user_id: str
    username: str
    password_hash: str
    first_name: str = ""
    last_name: str = ""
    created_at: str = field(default_factory=utc_now)
    updated_at: str = field(default_factory=utc_now)

    def to_dict(self) -> dict:
        data = asdict(self)
        data["id"] = data.pop("user_id")
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "User":
        return cls(
            user_id=data["id"],
            username=data["username"],
            password_hash=data["password_hash"],
            first_name=data.get("first_name", ""),
            last_name=data.get("last_name", ""),
            created_at=data.get("created_at", utc_now()),
            updated_at=data.get("updated_at", utc_now())
        )

    def serialize(self) -> dict:
        """Public profile. Never includes the password hash."""
        return {
            "id": self.user_id,
            "username": self.username,
            "firstName": self.first_name,
            "lastName": self.last_name,
        }

    def to_principal(self) -> dict:
        """Subset of the user embedded in auth tokens."""
        return self.serialize()


class UserStore:
    """
    Document-store backed user storage.

    Usernames are indexed as a unique key; the password is hashed once,
    on creation, and only the hash is persisted.
    """

    def __init__(self, store: DocumentStore, password_handler: Optional[PasswordHandler] = None):
        """
        Initialize user store.

        Args:
            store: Document store holding the users collection
            password_handler: Hasher used on creation (default: PasswordHandler())
        """
        self.collection = store.collection(USERS_COLLECTION)
        self.password_handler = password_handler or PasswordHandler()

    async def create_user(
        self,
        username: str,
        password: str,
        first_name: str = "",
        last_name: str = ""
    ) -> User:
        """
        Create a new user.

        Args:
            username: Unique username (already validated)
            password: Plain text password (already validated)
            first_name: Optional first name
            last_name: Optional last name

        Returns:
            Created User object

        Raises:
            ValidationError: If the username is already taken
        """
        if await self.user_exists(username):
            raise ValidationError("Username already taken", location="username")

        password_hash = await self.password_handler.hash_async(password)
        user = User(
            user_id=new_id(),
            username=username,
            password_hash=password_hash,
            first_name=first_name,
            last_name=last_name
        )

        try:
            await self.collection.insert(user.to_dict(), unique=("username",))
        except DuplicateKeyError:
            # Lost a race with a concurrent signup for the same name
            raise ValidationError("Username already taken", location="username")

        logger.info(f"Created user: {username}")
        return user

    async def get_by_username(self, username: str) -> Optional[User]:
        """
        Get user by username.

        Returns:
            User if found, None otherwise
        """
        data = await self.collection.find_one({"username": username})
        return User.from_dict(data) if data else None

    async def get_by_id(self, user_id: str) -> Optional[User]:
        """
        Get user by user ID.

        Returns:
            User if found, None otherwise
        """
        data = await self.collection.find_one({"id": user_id})
        return User.from_dict(data) if data else None

    async def update_profile(
        self,
        user_id: str,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None
    ) -> Optional[User]:
        """
        Update a user's name fields. Username and password are not editable here.

        Returns:
            Updated User object or None if not found
        """
        fields = {"updated_at": utc_now()}
        if first_name is not None:
            fields["first_name"] = first_name.strip()
        if last_name is not None:
            fields["last_name"] = last_name.strip()

        data = await self.collection.update_one({"id": user_id}, fields)
        if data is None:
            return None

        logger.debug(f"Updated user: {data['username']}")
        return User.from_dict(data)

    async def update_password_hash(self, user_id: str, password_hash: str) -> bool:
        """
        Replace a stored hash, e.g. after the bcrypt cost changed.

        Returns:
            True if updated, False if not found
        """
        data = await self.collection.update_one(
            {"id": user_id},
            {"password_hash": password_hash, "updated_at": utc_now()}
        )
        return data is not None

    async def list_users(self) -> List[User]:
        """List all users in creation order."""
        return [User.from_dict(data) for data in await self.collection.find()]

    async def delete_user(self, username: str) -> bool:
        """
        Permanently delete a user.

        Returns:
            True if deleted, False if not found
        """
        deleted = await self.collection.delete_one({"username": username})
        if deleted:
            logger.info(f"Deleted user: {username}")
        return deleted

    async def user_exists(self, username: str) -> bool:
        return await self.get_by_username(username) is not None
