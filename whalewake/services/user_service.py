from datetime import timedelta
from typing import List, Optional
from uuid import UUID

from whalewake.core.context import OperationContext
from whalewake.core.errors import (
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from whalewake.core.logger import logger
from whalewake.core.security import hash_password, verify_password
from whalewake.db.params import (
    CreateUserParams,
    CreateUserProfileParams,
    CreateUserRoleParams,
    UpdateUserParams,
    UpdateUserProfileParams,
    UpdateUserRoleParams,
)
from whalewake.db.store import Store, UserTxResult
from whalewake.models.user import STANDARD_USER_ROLE, User
from whalewake.schemas.user import CreateUserRequest, ProfileFields, UpdateUserRequest
from whalewake.tokens.maker import TokenMaker
from whalewake.tokens.payload import Payload

PROFILE_FIELDS = tuple(ProfileFields.model_fields)


# every new user starts as a standard user, in the same transaction
def register_user(
    store: Store,
    data: CreateUserRequest,
    ctx: Optional[OperationContext] = None
) -> UserTxResult:
    user_params = CreateUserParams(
        username=data.username,
        email=data.email,
        password=hash_password(data.password)
    )
    profile_params = CreateUserProfileParams(
        **{name: getattr(data, name) for name in PROFILE_FIELDS}
    )
    role_params = CreateUserRoleParams(role_id=STANDARD_USER_ROLE)

    return store.create_user_with_profile_and_role(
        user_params, profile_params, role_params, ctx=ctx
    )


def update_user(
    store: Store,
    session: Payload,
    user_id: UUID,
    data: UpdateUserRequest,
    is_admin: bool,
    ctx: Optional[OperationContext] = None
) -> UserTxResult:
    if not data.model_dump(exclude_none=True):
        raise ValidationError("no fields to update")

    role_id = data.role_id
    if role_id is not None and not is_admin:
        current = store.exec_tx(lambda q: q.get_user_role(user_id), ctx=ctx)
        if role_id != current.role_id:
            raise ForbiddenError("only admins can change roles")
        # repeating the current role is not a change
        role_id = None

    user_params = UpdateUserParams(
        username=data.username,
        email=data.email,
        password=hash_password(data.password) if data.password else None
    )
    profile_params = UpdateUserProfileParams(
        **{name: getattr(data, name) for name in PROFILE_FIELDS}
    )
    role_params = UpdateUserRoleParams(role_id=role_id)

    result = store.update_user_with_profile_and_role(
        user_id, user_params, profile_params, role_params, ctx=ctx
    )
    logger.info(f"USER UPDATE | user_id={user_id} | by={session.account_id}")
    return result


def list_users(
    store: Store,
    page_id: int,
    page_size: int,
    ctx: Optional[OperationContext] = None
) -> List[User]:
    offset = (page_id - 1) * page_size
    return store.exec_tx(lambda q: q.list_users(page_size, offset), ctx=ctx)


def login_user(
    store: Store,
    token_maker: TokenMaker,
    email: str,
    password: str,
    duration: timedelta,
    ctx: Optional[OperationContext] = None
):
    try:
        user, role = store.exec_tx(
            lambda q: _user_and_role_by_email(q, email), ctx=ctx
        )
    except NotFoundError:
        logger.warning(f"LOGIN FAILED | email={email}")
        raise UnauthorizedError("invalid email or password")

    if not verify_password(password, user.password):
        logger.warning(f"LOGIN FAILED | email={email}")
        raise UnauthorizedError("invalid email or password")

    access_token = token_maker.create_token(user.id, role.role_id, duration)

    logger.info(f"LOGIN SUCCESS | user_id={user.id} | role_id={role.role_id}")
    return access_token, user


def _user_and_role_by_email(q, email: str):
    user = q.get_user_by_email(email)
    return user, q.get_user_role(user.id)
