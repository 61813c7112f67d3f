from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Request, Response
from pydantic import BaseModel

from chirpy.domain.chirps import ChirpTooLongError, validate_body
from chirpy.repositories.errors import NotFoundError
from chirpy.routers.deps import TokenInvalidError, current_user_id, error_response, get_chirp_service
from chirpy.services.chirp_service import ForbiddenError, InvalidSortError

router = APIRouter(prefix="/api", tags=["chirps"])


class ChirpIn(BaseModel):
    body: str = ""


@router.post("/validate_chirp")
def validate_chirp(payload: ChirpIn):
    try:
        cleaned = validate_body(payload.body)
    except ChirpTooLongError as exc:
        return error_response(400, str(exc))
    return {"cleaned_body": cleaned}


@router.post("/chirps", status_code=201)
def post_chirp(payload: ChirpIn, request: Request):
    try:
        author_id = current_user_id(request)
    except TokenInvalidError:
        return error_response(401, "Unauthorized")
    try:
        chirp = get_chirp_service(request).post(payload.body, author_id)
    except ChirpTooLongError as exc:
        return error_response(400, str(exc))
    return chirp.to_dict()


@router.get("/chirps")
def list_chirps(request: Request, author_id: Optional[int] = None, sort: str = "asc"):
    try:
        chirps = get_chirp_service(request).list(author_id=author_id, sort=sort)
    except InvalidSortError as exc:
        return error_response(400, str(exc))
    return [c.to_dict() for c in chirps]


def _parse_id(raw: str) -> Optional[int]:
    try:
        return int(raw)
    except ValueError:
        return None


@router.get("/chirps/{chirp_id}")
def get_chirp(chirp_id: str, request: Request):
    parsed = _parse_id(chirp_id)
    if parsed is None:
        return error_response(404, "Chirp not found")
    try:
        chirp = get_chirp_service(request).get(parsed)
    except NotFoundError:
        return error_response(404, "Chirp not found")
    return chirp.to_dict()


@router.delete("/chirps/{chirp_id}", status_code=204)
def delete_chirp(chirp_id: str, request: Request):
    try:
        requester = current_user_id(request)
    except TokenInvalidError:
        return error_response(401, "Unauthorized")
    parsed = _parse_id(chirp_id)
    if parsed is None:
        return error_response(404, "Chirp not found")
    try:
        get_chirp_service(request).delete(parsed, requester)
    except NotFoundError:
        return error_response(404, "Chirp not found")
    except ForbiddenError as exc:
        return error_response(403, str(exc))
    return Response(status_code=204)
