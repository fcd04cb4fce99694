import binascii
import json
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional
from uuid import UUID

from jose import jwe
from jose.constants import ALGORITHMS
from jose.exceptions import JOSEError

from whalewake.core.errors import InvalidTokenError, MissingKeyError
from whalewake.core.logger import logger
from whalewake.tokens.maker import TokenMaker
from whalewake.tokens.payload import Payload

KEY_SIZE = 32  # A256GCM
DEFAULT_REFRESH_DURATION = timedelta(minutes=15)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class JWETokenMaker(TokenMaker):
    """
    Symmetric token maker: the claim set is JSON encrypted as a compact JWE
    (direct key agreement, AES-256-GCM), so tokens are opaque to clients and
    tamper evident.

    The key is given once at construction and never changes.
    """

    def __init__(
        self,
        symmetric_key: bytes,
        refresh_duration: timedelta = DEFAULT_REFRESH_DURATION,
        clock: Optional[Callable[[], datetime]] = None
    ):
        if not symmetric_key or len(symmetric_key) != KEY_SIZE:
            raise MissingKeyError(f"token symmetric key must be exactly {KEY_SIZE} bytes")

        self._key = bytes(symmetric_key)
        self.refresh_duration = refresh_duration
        self._clock = clock or _utc_now

    @classmethod
    def from_hex(cls, key_hex: str, **kwargs) -> "JWETokenMaker":
        if not key_hex:
            raise MissingKeyError("token symmetric key is not set")
        try:
            key = binascii.unhexlify(key_hex)
        except (binascii.Error, ValueError) as e:
            raise MissingKeyError("failed to convert hex string to symmetric key") from e
        return cls(key, **kwargs)

    def create_token(self, account_id: UUID, role_id: int, duration: timedelta) -> str:
        payload = Payload.new(account_id, role_id, duration, now=self._clock())

        token = jwe.encrypt(
            json.dumps(payload.to_claims()),
            self._key,
            algorithm=ALGORITHMS.DIR,
            encryption=ALGORITHMS.A256GCM
        )
        return token.decode("utf-8")

    def _decrypt(self, token: str) -> Payload:
        try:
            plaintext = jwe.decrypt(token, self._key)
        except (JOSEError, KeyError, ValueError, TypeError) as e:
            raise InvalidTokenError() from e

        if not plaintext:
            raise InvalidTokenError()

        try:
            return Payload.from_claims(json.loads(plaintext))
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise InvalidTokenError() from e

    def verify_token(self, token: str) -> Payload:
        payload = self._decrypt(token)
        payload.valid(self._clock())
        return payload

    def refresh_token(self, token: str) -> str:
        # expired tokens cannot be refreshed
        payload = self.verify_token(token)

        new_token = self.create_token(
            payload.account_id,
            payload.role_id,
            self.refresh_duration
        )
        logger.info(f"TOKEN REFRESHED | user_id={payload.account_id} | old_token_id={payload.id}")
        return new_token
