from dataclasses import asdict
from typing import List
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session
from sqlalchemy.sql import func

from whalewake.core.errors import NotFoundError
from whalewake.db.params import (
    CreateUserParams,
    CreateUserProfileParams,
    CreateUserRoleParams,
    UpdateUserParams,
    UpdateUserProfileParams,
    UpdateUserRoleParams,
)
from whalewake.models.user import User, UserProfile, UserRole


class Queries:
    """
    Primitive record store: single-entity reads and writes bound to one
    SQLAlchemy session.

    Nothing here commits. Writes are flushed so the database enforces its
    constraints at the step that caused them; the caller owns the
    transaction (see ``whalewake.db.store.Store``).
    """

    def __init__(self, db: Session):
        self.db = db

    def _save(self, obj):
        self.db.add(obj)
        self.db.flush()
        # load server generated timestamps while the session is open
        self.db.refresh(obj)
        return obj

    def _remove(self, obj):
        self.db.delete(obj)
        self.db.flush()
        return obj

    @staticmethod
    def _apply(obj, params):
        changed = {k: v for k, v in asdict(params).items() if v is not None}
        for key, value in changed.items():
            setattr(obj, key, value)
        obj.updated_at = func.now()

    # =====================================================
    # USERS
    # =====================================================

    def create_user(self, params: CreateUserParams) -> User:
        return self._save(User(
            username=params.username,
            email=params.email,
            password=params.password
        ))

    def get_user(self, user_id: UUID) -> User:
        user = self.db.get(User, user_id)
        if user is None:
            raise NotFoundError(f"user {user_id} not found")
        return user

    def get_user_by_email(self, email: str) -> User:
        user = self.db.execute(
            select(User).where(User.email == email)
        ).scalar_one_or_none()
        if user is None:
            raise NotFoundError("user not found")
        return user

    def list_users(self, limit: int, offset: int) -> List[User]:
        return list(self.db.execute(
            select(User)
            .order_by(User.created_at, User.id)
            .limit(limit)
            .offset(offset)
        ).scalars().all())

    def update_user(self, user_id: UUID, params: UpdateUserParams) -> User:
        user = self.get_user(user_id)
        self._apply(user, params)
        return self._save(user)

    def delete_user(self, user_id: UUID) -> User:
        return self._remove(self.get_user(user_id))

    # =====================================================
    # USER PROFILES (keyed by owning user)
    # =====================================================

    def create_user_profile(self, params: CreateUserProfileParams) -> UserProfile:
        return self._save(UserProfile(**asdict(params)))

    def get_user_profile(self, user_id: UUID) -> UserProfile:
        profile = self.db.execute(
            select(UserProfile).where(UserProfile.user_id == user_id)
        ).scalar_one_or_none()
        if profile is None:
            raise NotFoundError(f"profile for user {user_id} not found")
        return profile

    def list_user_profiles(self, limit: int, offset: int) -> List[UserProfile]:
        return list(self.db.execute(
            select(UserProfile)
            .order_by(UserProfile.created_at, UserProfile.id)
            .limit(limit)
            .offset(offset)
        ).scalars().all())

    def update_user_profile(self, user_id: UUID, params: UpdateUserProfileParams) -> UserProfile:
        profile = self.get_user_profile(user_id)
        self._apply(profile, params)
        return self._save(profile)

    def delete_user_profile(self, user_id: UUID) -> UserProfile:
        return self._remove(self.get_user_profile(user_id))

    # =====================================================
    # USER ROLES (keyed by owning user)
    # =====================================================

    def create_user_role(self, params: CreateUserRoleParams) -> UserRole:
        return self._save(UserRole(user_id=params.user_id, role_id=params.role_id))

    def get_user_role(self, user_id: UUID) -> UserRole:
        role = self.db.execute(
            select(UserRole).where(UserRole.user_id == user_id)
        ).scalar_one_or_none()
        if role is None:
            raise NotFoundError(f"role for user {user_id} not found")
        return role

    def list_user_roles(self, limit: int, offset: int) -> List[UserRole]:
        return list(self.db.execute(
            select(UserRole)
            .order_by(UserRole.created_at, UserRole.id)
            .limit(limit)
            .offset(offset)
        ).scalars().all())

    def update_user_role(self, user_id: UUID, params: UpdateUserRoleParams) -> UserRole:
        role = self.get_user_role(user_id)
        self._apply(role, params)
        return self._save(role)

    def delete_user_role(self, user_id: UUID) -> UserRole:
        return self._remove(self.get_user_role(user_id))
