from dataclasses import dataclass, replace
from typing import Callable, Optional, TypeVar
from uuid import UUID

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from whalewake.core.context import OperationContext
from whalewake.core.errors import AppError, ConflictError, InternalError, NotFoundError
from whalewake.core.logger import logger
from whalewake.db.params import (
    CreateUserParams,
    CreateUserProfileParams,
    CreateUserRoleParams,
    UpdateUserParams,
    UpdateUserProfileParams,
    UpdateUserRoleParams,
)
from whalewake.db.queries import Queries
from whalewake.models.user import User, UserProfile, UserRole

T = TypeVar("T")


@dataclass
class UserTxResult:
    user: User
    user_profile: UserProfile
    user_role: UserRole


def _check(ctx: Optional[OperationContext]) -> None:
    if ctx is not None:
        ctx.check()


class Store:
    """
    Runs user, profile and role writes as one transaction.

    Every public ``*_with_profile_and_role`` method borrows one session from
    ``session_factory``, runs its steps in a fixed order and either commits
    all of them or rolls all of them back. The session goes back to the
    pool on every exit path.
    """

    def __init__(self, session_factory, queries_cls=Queries):
        self.session_factory = session_factory
        self.queries_cls = queries_cls

    def exec_tx(
        self,
        fn: Callable[[Queries], T],
        *,
        ctx: Optional[OperationContext] = None
    ) -> T:
        _check(ctx)

        db = self.session_factory()
        try:
            with db.begin():
                result = fn(self.queries_cls(db))
                # a signal that fired during the last step still aborts
                _check(ctx)
            return result

        except AppError as e:
            logger.warning(f"TX ROLLBACK | error={type(e).__name__} | detail={e.message}")
            raise
        except IntegrityError as e:
            logger.warning(f"TX ROLLBACK | error=IntegrityError | detail={e.orig}")
            raise ConflictError("conflicting user record") from e
        except SQLAlchemyError as e:
            logger.error(f"TX ROLLBACK | error={type(e).__name__} | detail={e}")
            raise InternalError("database error") from e
        finally:
            db.close()

    # =====================================================
    # CREATE
    # =====================================================

    def _ensure_email_free(self, email: str, ctx: Optional[OperationContext]) -> None:
        try:
            self.exec_tx(lambda q: q.get_user_by_email(email), ctx=ctx)
        except NotFoundError:
            return
        raise ConflictError("user already exists")

    def create_user_with_profile_and_role(
        self,
        user_params: CreateUserParams,
        profile_params: CreateUserProfileParams,
        role_params: CreateUserRoleParams,
        *,
        ctx: Optional[OperationContext] = None
    ) -> UserTxResult:
        # checked outside the write transaction
        self._ensure_email_free(user_params.email, ctx)

        def steps(q: Queries) -> UserTxResult:
            user = q.create_user(user_params)
            _check(ctx)

            profile = q.create_user_profile(replace(profile_params, user_id=user.id))
            _check(ctx)

            role = q.create_user_role(replace(role_params, user_id=user.id))
            return UserTxResult(user=user, user_profile=profile, user_role=role)

        result = self.exec_tx(steps, ctx=ctx)
        logger.info(
            f"USER CREATED | user_id={result.user.id} | role_id={result.user_role.role_id}"
        )
        return result

    # =====================================================
    # GET
    # =====================================================

    def get_user_with_profile_and_role(
        self,
        user_id: UUID,
        *,
        ctx: Optional[OperationContext] = None
    ) -> UserTxResult:
        def steps(q: Queries) -> UserTxResult:
            user = q.get_user(user_id)
            _check(ctx)

            profile = q.get_user_profile(user_id)
            _check(ctx)

            role = q.get_user_role(user_id)
            return UserTxResult(user=user, user_profile=profile, user_role=role)

        return self.exec_tx(steps, ctx=ctx)

    # =====================================================
    # UPDATE
    # =====================================================

    def update_user_with_profile_and_role(
        self,
        user_id: UUID,
        user_params: UpdateUserParams,
        profile_params: UpdateUserProfileParams,
        role_params: UpdateUserRoleParams,
        *,
        ctx: Optional[OperationContext] = None
    ) -> UserTxResult:
        def steps(q: Queries) -> UserTxResult:
            user = q.update_user(user_id, user_params)
            _check(ctx)

            profile = q.update_user_profile(user_id, profile_params)
            _check(ctx)

            role = q.update_user_role(user_id, role_params)
            return UserTxResult(user=user, user_profile=profile, user_role=role)

        result = self.exec_tx(steps, ctx=ctx)
        logger.info(f"USER UPDATED | user_id={user_id}")
        return result

    # =====================================================
    # DELETE (dependents first)
    # =====================================================

    def delete_user_with_profile_and_role(
        self,
        user_id: UUID,
        *,
        ctx: Optional[OperationContext] = None
    ) -> UserTxResult:
        def steps(q: Queries) -> UserTxResult:
            role = q.delete_user_role(user_id)
            _check(ctx)

            profile = q.delete_user_profile(user_id)
            _check(ctx)

            user = q.delete_user(user_id)
            return UserTxResult(user=user, user_profile=profile, user_role=role)

        result = self.exec_tx(steps, ctx=ctx)
        logger.info(f"USER DELETED | user_id={user_id}")
        return result
