from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from whalewake.models.user import STANDARD_USER_ROLE


@dataclass
class CreateUserParams:
    username: str
    email: str
    password: str  # already hashed


@dataclass
class CreateUserProfileParams:
    user_id: Optional[UUID] = None  # bound by the store
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    business_name: Optional[str] = None
    street_address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None
    country_code: Optional[str] = None


@dataclass
class CreateUserRoleParams:
    user_id: Optional[UUID] = None  # bound by the store
    role_id: int = STANDARD_USER_ROLE


# update params: None leaves the column unchanged

@dataclass
class UpdateUserParams:
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


@dataclass
class UpdateUserProfileParams:
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    business_name: Optional[str] = None
    street_address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None
    country_code: Optional[str] = None


@dataclass
class UpdateUserRoleParams:
    role_id: Optional[int] = None
