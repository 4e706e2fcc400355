"""User access Commands - sign-up requests, login and admin approval."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional

from magazine_backend.domain.entities.user import User, to_legacy_list
from magazine_backend.domain.exceptions import (
    AuthenticationError,
    DomainValidationError,
    DuplicateEntityError,
    EntityNotFoundError,
)
from magazine_backend.domain.repositories import UserRepository
from magazine_backend.domain.services.text_formatting import format_value

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def _public(user: User) -> Dict[str, Any]:
    return {"name": format_value(user.name), "email": format_value(user.email), "confirmed": user.confirmed}


@dataclass(frozen=True)
class SignupCommand:
    name: Optional[str]
    email: Optional[str]


class SignupHandler:

    def __init__(self, user_repository: UserRepository):
        self._users = user_repository

    def handle(self, command: SignupCommand) -> Dict[str, Any]:
        name = (command.name or "").strip()
        email = (command.email or "").strip()
        if not name or not email:
            raise DomainValidationError("Name and email are required")
        if not EMAIL_PATTERN.match(email):
            raise DomainValidationError("Please provide a valid email address")

        candidate = User.register(name, email)
        existing = self._users.find(candidate.name, candidate.email)
        if existing is not None:
            if existing.confirmed:
                message = (
                    "An account with this name and email already exists and is active. "
                    "Please try logging in instead."
                )
            else:
                message = (
                    "An account with this name and email is already pending approval. "
                    "Please wait for admin confirmation."
                )
            raise DuplicateEntityError("User", email, message=message)

        user = self._users.add(candidate)
        logger.info("New sign-up request %s", user.id)
        return {
            "success": True,
            "message": "Account created successfully. Your request is pending admin approval.",
            "user": _public(user),
        }


@dataclass(frozen=True)
class LoginCommand:
    name: Optional[str]
    email: Optional[str]


class LoginHandler:
    """Only approved users may sign in; the stored values are matched exactly."""

    def __init__(self, user_repository: UserRepository):
        self._users = user_repository

    def handle(self, command: LoginCommand) -> Dict[str, Any]:
        if not command.name or not command.email:
            raise DomainValidationError("Name and email are required")
        user = self._users.find(to_legacy_list(command.name), to_legacy_list(command.email))
        if user is None or not user.confirmed:
            raise AuthenticationError("Invalid credentials")
        return {"success": True, "message": "Login successful", "user": _public(user)}


@dataclass(frozen=True)
class ConfirmUserCommand:
    name: Optional[str]
    email: Optional[str]
    confirmed: bool = True


class ConfirmUserHandler:

    def __init__(self, user_repository: UserRepository):
        self._users = user_repository

    def handle(self, command: ConfirmUserCommand) -> Dict[str, Any]:
        if not command.name or not command.email:
            raise DomainValidationError("Name and email are required")
        user = self._users.set_confirmed(
            to_legacy_list(command.name),
            to_legacy_list(command.email),
            command.confirmed,
        )
        if user is None:
            raise EntityNotFoundError("User", command.email, message="User not found")
        logger.info("User %s confirmed=%s", user.id, user.confirmed)
        return {"success": True, "user": _public(user)}


class ListUsersHandler:
    """Registered users with the legacy list wrapping removed."""

    def __init__(self, user_repository: UserRepository):
        self._users = user_repository

    def handle(self) -> list[Dict[str, Any]]:
        return [_public(user) for user in self._users.list_all()]
