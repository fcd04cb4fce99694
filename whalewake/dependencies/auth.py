from typing import Optional
from uuid import UUID

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from whalewake.core.auth_context import set_session_claim
from whalewake.core.errors import ForbiddenError, TokenError, UnauthorizedError
from whalewake.core.logger import logger
from whalewake.models.user import ADMIN_ROLE
from whalewake.tokens.maker import TokenMaker
from whalewake.tokens.payload import Payload

# scheme errors are reported as 401 below, not by fastapi
security = HTTPBearer(auto_error=False)


def get_token_maker(request: Request) -> TokenMaker:
    return request.app.state.token_maker


def get_current_session(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    token_maker: TokenMaker = Depends(get_token_maker)
) -> Payload:
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError("authorization header is not provided")

    try:
        payload = token_maker.verify_token(credentials.credentials)
    except TokenError as e:
        logger.info(f"TOKEN REJECTED | reason={type(e).__name__} | path={request.url.path}")
        raise UnauthorizedError("invalid or expired token") from e

    set_session_claim(request, payload)
    return payload


def is_admin(session: Payload) -> bool:
    return session.role_id == ADMIN_ROLE


def authorize_user_access(session: Payload, user_id: UUID) -> None:
    """Self access or admin override."""
    if session.account_id != user_id and not is_admin(session):
        raise ForbiddenError("you are not authorized to access this user")


def require_admin(
    session: Payload = Depends(get_current_session)
) -> Payload:
    if not is_admin(session):
        raise ForbiddenError("admin access required")
    return session
