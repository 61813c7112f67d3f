from __future__ import annotations

from fastapi import APIRouter, Request, Response

from chirpy.core.tokens import bearer_token
from chirpy.repositories.errors import NotFoundError
from chirpy.routers.deps import error_response, get_webhook_service
from chirpy.services.webhook_service import WebhookPayloadError, WebhookUnauthorizedError

router = APIRouter(prefix="/api/polka", tags=["hooks"])


@router.post("/webhooks", status_code=204)
def polka_webhook(payload: dict, request: Request):
    api_key = bearer_token(request.headers.get("authorization"), scheme="ApiKey")
    try:
        get_webhook_service(request).handle_polka_event(api_key, payload)
    except WebhookUnauthorizedError:
        return error_response(401, "Unauthorized")
    except WebhookPayloadError as exc:
        return error_response(400, str(exc))
    except NotFoundError:
        return error_response(404, "User not found")
    return Response(status_code=204)
