"""User signup and sign-in API routes for v1 endpoints."""
from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter, Depends

from magazine_backend.api.errors import to_http_exception
from magazine_backend.api.schemas import UserCredentialsSchema
from magazine_backend.api.v1.dependencies import (
    get_confirm_user_handler,
    get_list_users_handler,
    get_login_handler,
    get_signup_handler,
)
from magazine_backend.application.commands.user_access import (
    ConfirmUserCommand,
    ConfirmUserHandler,
    ListUsersHandler,
    LoginCommand,
    LoginHandler,
    SignupCommand,
    SignupHandler,
)
from magazine_backend.domain.exceptions import DomainException

router = APIRouter(prefix="/users", tags=["users"])


@router.post("/signup", status_code=201)
def signup(
    payload: UserCredentialsSchema,
    handler: SignupHandler = Depends(get_signup_handler),
) -> Dict[str, Any]:
    try:
        return handler.handle(SignupCommand(name=payload.name, email=payload.email))
    except DomainException as exc:
        raise to_http_exception(exc) from exc


@router.post("/login")
def login(
    payload: UserCredentialsSchema,
    handler: LoginHandler = Depends(get_login_handler),
) -> Dict[str, Any]:
    try:
        return handler.handle(LoginCommand(name=payload.name, email=payload.email))
    except DomainException as exc:
        raise to_http_exception(exc) from exc


@router.post("/confirm")
def confirm_user(
    payload: UserCredentialsSchema,
    handler: ConfirmUserHandler = Depends(get_confirm_user_handler),
) -> Dict[str, Any]:
    try:
        return handler.handle(ConfirmUserCommand(name=payload.name, email=payload.email))
    except DomainException as exc:
        raise to_http_exception(exc) from exc


@router.get("")
def list_users(handler: ListUsersHandler = Depends(get_list_users_handler)) -> List[Dict[str, Any]]:
    try:
        return handler.handle()
    except DomainException as exc:
        raise to_http_exception(exc) from exc
