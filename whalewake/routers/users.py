from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from whalewake.core.context import OperationContext
from whalewake.db.store import Store
from whalewake.dependencies.auth import (
    authorize_user_access,
    get_current_session,
    is_admin,
    require_admin,
)
from whalewake.dependencies.store import get_operation_context, get_store
from whalewake.schemas.user import (
    CreateUserRequest,
    UpdateUserRequest,
    UserResponse,
    UserTxResponse,
)
from whalewake.services import user_service
from whalewake.tokens.payload import Payload

router = APIRouter(prefix="/users", tags=["Users"])


@router.post("", response_model=UserTxResponse)
def create_user(
    data: CreateUserRequest,
    store: Store = Depends(get_store),
    ctx: OperationContext = Depends(get_operation_context),
):
    result = user_service.register_user(store, data, ctx)
    return UserTxResponse.from_tx(result)


@router.get("", response_model=List[UserResponse])
def list_users(
    page_id: int = Query(..., ge=1),
    page_size: int = Query(..., ge=1, le=100),
    session: Payload = Depends(require_admin),
    store: Store = Depends(get_store),
    ctx: OperationContext = Depends(get_operation_context),
):
    users = user_service.list_users(store, page_id, page_size, ctx)
    return [UserResponse.model_validate(user) for user in users]


@router.get("/{user_id}", response_model=UserTxResponse)
def get_user(
    user_id: UUID,
    session: Payload = Depends(get_current_session),
    store: Store = Depends(get_store),
    ctx: OperationContext = Depends(get_operation_context),
):
    # policy before the lookup: non-admins learn nothing about other ids
    authorize_user_access(session, user_id)

    result = store.get_user_with_profile_and_role(user_id, ctx=ctx)
    return UserTxResponse.from_tx(result)


@router.put("/{user_id}", response_model=UserTxResponse)
def update_user(
    user_id: UUID,
    data: UpdateUserRequest,
    session: Payload = Depends(get_current_session),
    store: Store = Depends(get_store),
    ctx: OperationContext = Depends(get_operation_context),
):
    authorize_user_access(session, user_id)

    result = user_service.update_user(
        store, session, user_id, data, is_admin(session), ctx
    )
    return UserTxResponse.from_tx(result)


@router.delete("/{user_id}", response_model=UserTxResponse)
def delete_user(
    user_id: UUID,
    session: Payload = Depends(require_admin),
    store: Store = Depends(get_store),
    ctx: OperationContext = Depends(get_operation_context),
):
    result = store.delete_user_with_profile_and_role(user_id, ctx=ctx)
    return UserTxResponse.from_tx(result)
