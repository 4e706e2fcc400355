"""
Unit tests for sign-up, login and approval
"""
import pytest

from magazine_backend.application.commands.user_access import (
    ConfirmUserCommand,
    ConfirmUserHandler,
    ListUsersHandler,
    LoginCommand,
    LoginHandler,
    SignupCommand,
    SignupHandler,
)
from magazine_backend.domain.exceptions import (
    AuthenticationError,
    DomainValidationError,
    DuplicateEntityError,
    EntityNotFoundError,
)
from magazine_backend.infrastructure.persistence.file_user_repository import FileUserRepository
from magazine_backend.infrastructure.persistence.json_table_store import JsonTableStore


@pytest.fixture
def users(tmp_path):
    return FileUserRepository(JsonTableStore(str(tmp_path)))


class TestSignup:

    def test_signup_creates_pending_user(self, users):
        result = SignupHandler(users).handle(SignupCommand(name=" Asha ", email="asha@example.com"))

        assert result["user"] == {"name": "Asha", "email": "asha@example.com", "confirmed": False}
        assert users.find('["Asha"]', '["asha@example.com"]') is not None

    @pytest.mark.parametrize(
        "name,email,message",
        [
            ("", "a@b.co", "Name and email are required"),
            ("Asha", None, "Name and email are required"),
            ("Asha", "not-an-email", "Please provide a valid email address"),
        ],
    )
    def test_signup_validation(self, users, name, email, message):
        with pytest.raises(DomainValidationError, match=message):
            SignupHandler(users).handle(SignupCommand(name=name, email=email))

    def test_duplicate_messages(self, users):
        handler = SignupHandler(users)
        handler.handle(SignupCommand(name="Asha", email="asha@example.com"))

        with pytest.raises(DuplicateEntityError, match="pending approval"):
            handler.handle(SignupCommand(name="Asha", email="asha@example.com"))

        ConfirmUserHandler(users).handle(ConfirmUserCommand(name="Asha", email="asha@example.com"))
        with pytest.raises(DuplicateEntityError, match="already exists and is active"):
            handler.handle(SignupCommand(name="Asha", email="asha@example.com"))


class TestLoginAndConfirm:

    def test_pending_user_cannot_log_in(self, users):
        SignupHandler(users).handle(SignupCommand(name="Asha", email="asha@example.com"))

        with pytest.raises(AuthenticationError, match="Invalid credentials"):
            LoginHandler(users).handle(LoginCommand(name="Asha", email="asha@example.com"))

    def test_confirmed_user_logs_in(self, users):
        SignupHandler(users).handle(SignupCommand(name="Asha", email="asha@example.com"))
        ConfirmUserHandler(users).handle(ConfirmUserCommand(name="Asha", email="asha@example.com"))

        result = LoginHandler(users).handle(LoginCommand(name="Asha", email="asha@example.com"))

        assert result["message"] == "Login successful"
        assert ListUsersHandler(users).handle() == [
            {"name": "Asha", "email": "asha@example.com", "confirmed": True}
        ]

    def test_confirm_unknown_user(self, users):
        with pytest.raises(EntityNotFoundError, match="User not found"):
            ConfirmUserHandler(users).handle(ConfirmUserCommand(name="Nobody", email="n@example.com"))

    def test_login_requires_both_fields(self, users):
        with pytest.raises(DomainValidationError):
            LoginHandler(users).handle(LoginCommand(name="Asha", email=""))
