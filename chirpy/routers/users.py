from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Request, Response
from pydantic import BaseModel

from chirpy.core.tokens import bearer_token
from chirpy.repositories.errors import NotFoundError
from chirpy.routers.deps import current_user_id, error_response, get_auth_service
from chirpy.services.auth_service import (
    AccountExistsError,
    InvalidCredentialsError,
    RegistrationError,
    TokenInvalidError,
)

router = APIRouter(prefix="/api", tags=["users"])


class Credentials(BaseModel):
    email: str = ""
    password: str = ""


class LoginIn(Credentials):
    expires_in_seconds: Optional[int] = None


@router.post("/users", status_code=201)
def create_user(payload: Credentials, request: Request):
    try:
        user = get_auth_service(request).register(payload.email, payload.password)
    except RegistrationError as exc:
        return error_response(400, exc.message)
    except AccountExistsError as exc:
        return error_response(409, str(exc))
    return user.public_dict()


@router.put("/users")
def update_user(payload: Credentials, request: Request):
    try:
        user_id = current_user_id(request)
    except TokenInvalidError:
        return error_response(401, "Unauthorized")
    try:
        user = get_auth_service(request).update_credentials(user_id, payload.email, payload.password)
    except RegistrationError as exc:
        return error_response(400, exc.message)
    except AccountExistsError as exc:
        return error_response(409, str(exc))
    except NotFoundError:
        return error_response(401, "Unauthorized")
    return user.public_dict()


@router.post("/login")
def login(payload: LoginIn, request: Request):
    try:
        result = get_auth_service(request).login(payload.email, payload.password, payload.expires_in_seconds)
    except InvalidCredentialsError as exc:
        return error_response(401, str(exc))
    body = result.user.public_dict()
    body.update({"token": result.token, "refresh_token": result.refresh_token})
    return body


@router.post("/refresh")
def refresh(request: Request):
    token = bearer_token(request.headers.get("authorization"))
    try:
        access = get_auth_service(request).refresh(token)
    except TokenInvalidError:
        return error_response(401, "Unauthorized")
    return {"token": access}


@router.post("/revoke", status_code=204)
def revoke(request: Request):
    token = bearer_token(request.headers.get("authorization"))
    try:
        get_auth_service(request).revoke(token)
    except TokenInvalidError:
        return error_response(401, "Unauthorized")
    return Response(status_code=204)
