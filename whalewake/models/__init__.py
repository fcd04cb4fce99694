# whalewake/models/__init__.py

from .user import (
    User,
    UserProfile,
    UserRole,
    STANDARD_USER_ROLE,
    ADMIN_ROLE
)
