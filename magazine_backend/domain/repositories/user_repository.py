"""User repository interface."""

from abc import ABC, abstractmethod
from typing import List, Optional

from magazine_backend.domain.entities.user import User


class UserRepository(ABC):

    @abstractmethod
    def find(self, name: str, email: str) -> Optional[User]:
        """Look up by the stored (legacy-formatted) name and email."""

    @abstractmethod
    def add(self, user: User) -> User:
        """Insert the user and return it with its id."""

    @abstractmethod
    def set_confirmed(self, name: str, email: str, confirmed: bool = True) -> Optional[User]:
        """Update the confirmed flag; return the updated user or None."""

    @abstractmethod
    def list_all(self) -> List[User]:
        """Every registered user."""
