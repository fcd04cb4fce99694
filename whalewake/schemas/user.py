from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from typing_extensions import Annotated

from whalewake.db.store import UserTxResult

Password = Annotated[str, Field(min_length=8, max_length=32)]


class ProfileFields(BaseModel):
    first_name: Optional[Annotated[str, Field(max_length=100)]] = None
    last_name: Optional[Annotated[str, Field(max_length=100)]] = None
    business_name: Optional[Annotated[str, Field(max_length=127)]] = None
    street_address: Optional[Annotated[str, Field(max_length=255)]] = None
    city: Optional[Annotated[str, Field(max_length=100)]] = None
    state: Optional[Annotated[str, Field(max_length=50)]] = None
    zip: Optional[Annotated[str, Field(max_length=16)]] = None
    country_code: Optional[Annotated[str, Field(max_length=8)]] = None


class CreateUserRequest(ProfileFields):
    username: Annotated[str, Field(min_length=1, max_length=64)]
    email: EmailStr
    password: Password


class UpdateUserRequest(ProfileFields):
    username: Optional[Annotated[str, Field(min_length=1, max_length=64)]] = None
    email: Optional[EmailStr] = None
    password: Optional[Password] = None
    role_id: Optional[int] = None


class LoginUserRequest(BaseModel):
    email: EmailStr
    password: Password


class RefreshTokenRequest(BaseModel):
    access_token: Annotated[str, Field(min_length=1)]


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    username: str
    email: str
    created_at: datetime
    updated_at: datetime
    verified_at: Optional[datetime] = None


class UserTxResponse(ProfileFields):
    id: UUID
    username: str
    email: str
    role_id: int
    created_at: datetime
    updated_at: datetime
    verified_at: Optional[datetime] = None

    @classmethod
    def from_tx(cls, result: UserTxResult) -> "UserTxResponse":
        user, profile = result.user, result.user_profile
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            first_name=profile.first_name,
            last_name=profile.last_name,
            business_name=profile.business_name,
            street_address=profile.street_address,
            city=profile.city,
            state=profile.state,
            zip=profile.zip,
            country_code=profile.country_code,
            role_id=result.user_role.role_id,
            created_at=user.created_at,
            updated_at=user.updated_at,
            verified_at=user.verified_at,
        )


class LoginUserResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
