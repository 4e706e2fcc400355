"""File-based implementation of UserRepository."""

from __future__ import annotations

from typing import List, Optional

from magazine_backend.domain.entities.timestamps import format_timestamp, utc_now
from magazine_backend.domain.entities.user import User
from magazine_backend.domain.repositories.user_repository import UserRepository

from .json_table_store import JsonTableStore

TABLE = "users"


class FileUserRepository(UserRepository):

    def __init__(self, store: JsonTableStore) -> None:
        self.store = store

    def find(self, name: str, email: str) -> Optional[User]:
        for row in self.store.rows(TABLE):
            if row.get("name") == name and row.get("email") == email:
                return User.from_dict(row)
        return None

    def add(self, user: User) -> User:
        row = user.to_dict()
        row["created_at"] = row.get("created_at") or format_timestamp(utc_now())
        with self.store.transaction(TABLE) as table:
            stored = table.insert(row)
        return User.from_dict(stored)

    def set_confirmed(self, name: str, email: str, confirmed: bool = True) -> Optional[User]:
        with self.store.transaction(TABLE) as table:
            for row in table.rows:
                if row.get("name") == name and row.get("email") == email:
                    row["confirmed"] = confirmed
                    return User.from_dict(row)
        return None

    def list_all(self) -> List[User]:
        return [User.from_dict(row) for row in self.store.rows(TABLE)]
