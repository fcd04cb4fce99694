from typing import Optional

from fastapi import Request

from whalewake.tokens.payload import Payload

SESSION_CLAIM_ATTR = "session_claim"


def set_session_claim(request: Request, payload: Payload) -> None:
    setattr(request.state, SESSION_CLAIM_ATTR, payload)


def get_session_claim(request: Request) -> Optional[Payload]:
    """Payload attached by the authorization gate, or None on public routes."""
    payload = getattr(request.state, SESSION_CLAIM_ATTR, None)
    if isinstance(payload, Payload):
        return payload
    return None
