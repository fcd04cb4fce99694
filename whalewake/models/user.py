import uuid
from sqlalchemy import Column, String, Integer, ForeignKey, DateTime, Uuid
from sqlalchemy.sql import func
from whalewake.db.base import Base


STANDARD_USER_ROLE = 1
ADMIN_ROLE = 3


# =====================================================
# USER
# =====================================================

class User(Base):
    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    username = Column(String, unique=True, nullable=False)
    email = Column(String, unique=True, nullable=False)
    password = Column(String, nullable=False)  # bcrypt hash
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    verified_at = Column(DateTime(timezone=True))

"""
Table users {
  id uuid [pk]
  username varchar [not null, unique]
  email varchar [not null, unique]
  password varchar [not null]
  created_at timestamptz
  updated_at timestamptz
  verified_at timestamptz
}
"""


# =====================================================
# USER PROFILE
# =====================================================

class UserProfile(Base):
    __tablename__ = "user_profile"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("users.id"),
        unique=True,
        nullable=False
    )
    first_name = Column(String(100))
    last_name = Column(String(100))
    business_name = Column(String(127))
    street_address = Column(String(255))
    city = Column(String(100))
    state = Column(String(50))
    zip = Column(String(16))
    country_code = Column(String(8))
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    verified_at = Column(DateTime(timezone=True))


# =====================================================
# USER ROLE
# =====================================================

class UserRole(Base):
    __tablename__ = "user_role"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("users.id"),
        unique=True,
        nullable=False
    )
    role_id = Column(Integer, nullable=False, default=STANDARD_USER_ROLE)  # 1 user, 3 admin
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    verified_at = Column(DateTime(timezone=True))
