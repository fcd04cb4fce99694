import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict
from uuid import UUID

from whalewake.core.errors import ExpiredTokenError


def _parse_timestamp(value: str) -> datetime:
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        raise ValueError("timestamp without timezone")
    return parsed


@dataclass
class Payload:
    id: UUID            # unique per issued token
    account_id: UUID
    role_id: int
    issued_at: datetime
    expires_at: datetime

    @classmethod
    def new(cls, account_id: UUID, role_id: int, duration: timedelta, now: datetime) -> "Payload":
        return cls(
            id=uuid.uuid4(),
            account_id=account_id,
            role_id=role_id,
            issued_at=now,
            expires_at=now + duration,
        )

    def to_claims(self) -> Dict[str, Any]:
        return {
            "id": str(self.id),
            "account_id": str(self.account_id),
            "role_id": self.role_id,
            "issued_at": self.issued_at.isoformat(),
            "expires_at": self.expires_at.isoformat(),
        }

    @classmethod
    def from_claims(cls, claims: Dict[str, Any]) -> "Payload":
        """Raises KeyError, TypeError, ValueError or AttributeError on a malformed claim set."""
        role_id = claims["role_id"]
        if isinstance(role_id, bool) or not isinstance(role_id, int):
            raise TypeError("role_id must be an integer")

        return cls(
            id=UUID(claims["id"]),
            account_id=UUID(claims["account_id"]),
            role_id=role_id,
            issued_at=_parse_timestamp(claims["issued_at"]),
            expires_at=_parse_timestamp(claims["expires_at"]),
        )

    def valid(self, now: datetime) -> None:
        if now > self.expires_at:
            raise ExpiredTokenError()
