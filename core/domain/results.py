"""
Tagged results for calls to the remote backend.

Callers branch on `.ok` instead of catching exceptions: the server client
turns every transport problem into an Unavailable value.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

from core.domain.constants import SERVICE_UNAVAILABLE


@dataclass(frozen=True)
class Ok:
    """2xx response with its decoded JSON body"""
    status: int
    payload: Any = None

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Unavailable:
    """Non-2xx response, or a synthetic one for network/timeout/session failures"""
    status: int
    reason: str
    payload: Dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return False

    @classmethod
    def synthetic(cls, reason: str) -> "Unavailable":
        return cls(
            status=SERVICE_UNAVAILABLE,
            reason=reason,
            payload={"error": "Service unavailable", "message": reason},
        )

    @property
    def is_outage(self) -> bool:
        return self.status == SERVICE_UNAVAILABLE


RemoteResult = Union[Ok, Unavailable]


def payload_field(result: RemoteResult, key: str) -> Optional[Any]:
    """Pull a top-level key out of an Ok payload, None otherwise"""
    if isinstance(result, Ok) and isinstance(result.payload, dict):
        return result.payload.get(key)
    return None
