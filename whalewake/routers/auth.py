from datetime import timedelta

from fastapi import APIRouter, Depends

from whalewake.core.config import settings
from whalewake.core.context import OperationContext
from whalewake.core.errors import TokenError, UnauthorizedError
from whalewake.core.logger import logger
from whalewake.db.store import Store
from whalewake.dependencies.auth import get_token_maker
from whalewake.dependencies.store import get_operation_context, get_store
from whalewake.schemas.user import (
    LoginUserRequest,
    LoginUserResponse,
    RefreshTokenRequest,
    TokenResponse,
    UserResponse,
)
from whalewake.services import user_service
from whalewake.tokens.maker import TokenMaker


router = APIRouter(prefix="/users", tags=["Auth"])


@router.post("/login", response_model=LoginUserResponse)
def login_user(
    data: LoginUserRequest,
    store: Store = Depends(get_store),
    token_maker: TokenMaker = Depends(get_token_maker),
    ctx: OperationContext = Depends(get_operation_context),
):
    access_token, user = user_service.login_user(
        store,
        token_maker,
        data.email,
        data.password,
        timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        ctx,
    )
    return LoginUserResponse(
        access_token=access_token,
        user=UserResponse.model_validate(user)
    )


@router.post("/token/refresh", response_model=TokenResponse)
def refresh_token(
    data: RefreshTokenRequest,
    token_maker: TokenMaker = Depends(get_token_maker),
):
    try:
        access_token = token_maker.refresh_token(data.access_token)
    except TokenError as e:
        logger.info(f"TOKEN REFRESH REJECTED | reason={type(e).__name__}")
        raise UnauthorizedError("invalid or expired token") from e

    return TokenResponse(access_token=access_token)
