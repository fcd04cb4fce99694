from fastapi import Request

from whalewake.core.config import settings
from whalewake.core.context import OperationContext
from whalewake.db.store import Store


def get_store(request: Request) -> Store:
    return request.app.state.store


def get_operation_context() -> OperationContext:
    return OperationContext.with_timeout(settings.REQUEST_TIMEOUT_SECONDS)
