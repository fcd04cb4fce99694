import threading
import time
from dataclasses import dataclass, field
from typing import Optional

from whalewake.core.errors import OperationCancelled


@dataclass
class OperationContext:
    """
    Caller supplied cancellation signal for store operations.

    ``deadline`` is a ``time.monotonic()`` value. The store calls ``check()``
    between the steps of a transaction, so a fired signal aborts the
    transaction and rolls it back.
    """
    deadline: Optional[float] = None
    cancel_event: threading.Event = field(default_factory=threading.Event)

    @classmethod
    def with_timeout(cls, seconds: Optional[float]) -> "OperationContext":
        if seconds is None:
            return cls()
        return cls(deadline=time.monotonic() + seconds)

    def cancel(self) -> None:
        self.cancel_event.set()

    def check(self) -> None:
        if self.cancel_event.is_set():
            raise OperationCancelled("operation cancelled")
        if self.deadline is not None and time.monotonic() >= self.deadline:
            raise OperationCancelled("operation deadline exceeded")
