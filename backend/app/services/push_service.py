"""Best-effort push delivery through the Expo push service.

Runs after the database work has committed (FastAPI background task), and
only ever receives plain strings, never ORM objects. Any failure is logged
and dropped: the in-app notification row is the record of truth.
"""

import logging
from typing import Optional

import httpx

from app.config import settings

logger = logging.getLogger(__name__)

# Expo accepts at most 100 messages per request
MAX_BATCH_SIZE = 100

TOKEN_PREFIXES = ("ExponentPushToken[", "ExpoPushToken[")


def is_expo_token(token: Optional[str]) -> bool:
    return bool(token) and token.startswith(TOKEN_PREFIXES) and token.endswith("]")


def _headers() -> dict:
    headers = {
        "Accept": "application/json",
        "Content-Type": "application/json",
    }
    if settings.EXPO_ACCESS_TOKEN:
        headers["Authorization"] = f"Bearer {settings.EXPO_ACCESS_TOKEN}"
    return headers


def _build_messages(tokens: list[str], title: str, body: str, data: Optional[dict]) -> list[dict]:
    messages = []
    for token in tokens:
        message = {"to": token, "title": title, "body": body, "sound": "default"}
        if data:
            message["data"] = data
        messages.append(message)
    return messages


def send_push(tokens: list[str], title: str, body: str, data: Optional[dict] = None) -> int:
    """Deliver one push message per token. Returns how many Expo accepted.

    Never raises.
    """
    if not settings.PUSH_ENABLED:
        logger.debug("Push disabled, skipping %d token(s)", len(tokens))
        return 0

    valid = [t for t in tokens if is_expo_token(t)]
    if len(valid) < len(tokens):
        logger.warning("Skipping %d malformed push token(s)", len(tokens) - len(valid))
    if not valid:
        return 0

    messages = _build_messages(valid, title, body, data)
    accepted = 0
    try:
        with httpx.Client(timeout=settings.PUSH_TIMEOUT_SECONDS) as client:
            for start in range(0, len(messages), MAX_BATCH_SIZE):
                batch = messages[start:start + MAX_BATCH_SIZE]
                response = client.post(settings.EXPO_PUSH_URL, json=batch, headers=_headers())
                response.raise_for_status()
                accepted += _count_accepted(response.json())
    except (httpx.HTTPError, ValueError) as e:
        logger.warning("Push delivery failed (non-fatal): %s", e)
        return accepted

    logger.info("Push delivered: %d/%d accepted", accepted, len(messages))
    return accepted


def _count_accepted(payload) -> int:
    """Count "ok" tickets in an Expo response, logging the rejected ones."""
    tickets = payload.get("data") if isinstance(payload, dict) else None
    if not isinstance(tickets, list):
        logger.warning("Unexpected push response body: %.200r", payload)
        return 0
    accepted = 0
    for ticket in tickets:
        if not isinstance(ticket, dict):
            logger.warning("Malformed push ticket: %.200r", ticket)
        elif ticket.get("status") == "ok":
            accepted += 1
        else:
            details = ticket.get("details")
            logger.warning(
                "Push ticket rejected: %s (%s)",
                ticket.get("message"),
                details.get("error") if isinstance(details, dict) else details,
            )
    return accepted


def send_push_to_user(push_token: Optional[str], title: str, body: str) -> int:
    """Convenience wrapper for a single recipient that may have no token."""
    if not push_token:
        return 0
    return send_push([push_token], title, body)
