"""Supabase implementation of UserRepository."""

from __future__ import annotations

from typing import List, Optional

from magazine_backend.domain.entities.user import User
from magazine_backend.domain.repositories.user_repository import UserRepository

from .client import SupabaseTable

TABLE = "users"


class SupabaseUserRepository(SupabaseTable, UserRepository):
    entity_type = "User"

    def find(self, name: str, email: str) -> Optional[User]:
        response = self._execute(
            self.client.table(TABLE).select("*").eq("name", name).eq("email", email).limit(1),
            "fetch user",
        )
        rows = response.data or []
        return User.from_dict(rows[0]) if rows else None

    def add(self, user: User) -> User:
        row = {"name": user.name, "email": user.email, "confirmed": user.confirmed}
        response = self._execute(self.client.table(TABLE).insert(row), "insert user", key=user.email)
        return User.from_dict(response.data[0])

    def set_confirmed(self, name: str, email: str, confirmed: bool = True) -> Optional[User]:
        response = self._execute(
            self.client.table(TABLE).update({"confirmed": confirmed}).eq("name", name).eq("email", email),
            "confirm user",
        )
        rows = response.data or []
        return User.from_dict(rows[0]) if rows else None

    def list_all(self) -> List[User]:
        rows = self._fetch_all(lambda: self.client.table(TABLE).select("*").order("id"), "list users")
        return [User.from_dict(row) for row in rows]
