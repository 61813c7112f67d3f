"""Payment provider (Polka) webhook handling."""

from __future__ import annotations

import logging
import secrets
from typing import Any, Mapping, Optional

from chirpy.repositories.json_repository import JSONRepository

logger = logging.getLogger(__name__)

USER_UPGRADED = "user.upgraded"


class WebhookError(Exception):
    pass


class WebhookUnauthorizedError(WebhookError):
    pass


class WebhookPayloadError(WebhookError):
    pass


class WebhookService:
    def __init__(self, repository: JSONRepository, api_key: str) -> None:
        self.repository = repository
        self.api_key = api_key

    def handle_polka_event(self, api_key: Optional[str], payload: Mapping[str, Any]) -> bool:
        """
        Apply a Polka event. Returns True when the event changed state and
        False when it was ignored. Raises NotFoundError for unknown users.
        """
        if not self.api_key or not api_key or not secrets.compare_digest(
            api_key.encode("utf-8"), self.api_key.encode("utf-8")
        ):
            raise WebhookUnauthorizedError("Invalid API key")
        event = payload.get("event")
        if event != USER_UPGRADED:
            logger.debug("Ignoring Polka event %r", event)
            return False
        data = payload.get("data") or {}
        try:
            user_id = int(data["user_id"])
        except (KeyError, TypeError, ValueError) as exc:
            raise WebhookPayloadError("data.user_id is required") from exc
        self.repository.upgrade_user(user_id)
        return True
