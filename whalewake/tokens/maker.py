from abc import ABC, abstractmethod
from datetime import timedelta
from uuid import UUID

from whalewake.tokens.payload import Payload


class TokenMaker(ABC):
    """Issues and checks stateless session tokens."""

    @abstractmethod
    def create_token(self, account_id: UUID, role_id: int, duration: timedelta) -> str:
        """Return a new token for ``account_id`` valid for ``duration``."""

    @abstractmethod
    def verify_token(self, token: str) -> Payload:
        """Return the token's payload or raise InvalidTokenError / ExpiredTokenError."""

    @abstractmethod
    def refresh_token(self, token: str) -> str:
        """Return a fresh token for the same account and role as a valid ``token``."""
