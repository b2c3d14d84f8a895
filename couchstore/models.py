"""
Data models for CouchStore
"""

from enum import Enum
from typing import Optional, Dict, Any, List
from .exceptions import StoreError, TransportError


class ConnectionState(str, Enum):
    """Connection state of a CouchSource"""
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


class Model:
    """
    Caller-side record bound to a collection

    Carries its own collection name and prefix, so it can be passed
    anywhere a collection name is accepted.

    Example:
        >>> post = Model("posts", data={"title": "a post"})
        >>> source.create(post)
    """

    def __init__(
        self,
        table: str,
        table_prefix: str = "",
        data: Optional[Dict[str, Any]] = None,
        id: Optional[str] = None
    ):
        self.table = table
        self.table_prefix = table_prefix or ""
        self.data = data
        self.id = id

    def __repr__(self):
        return f"Model(table={self.table}, table_prefix={self.table_prefix}, id={self.id})"


class StoreFailure:
    """Error document reported by the server"""

    def __init__(self, error: str, reason: Optional[str] = None):
        self.error = error
        self.reason = reason

    def __eq__(self, other):
        return (
            isinstance(other, StoreFailure)
            and (self.error, self.reason) == (other.error, other.reason)
        )

    def __repr__(self):
        return f"StoreFailure(error={self.error}, reason={self.reason})"


class TransportFailure:
    """Exchange that produced no usable document"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code

    def __repr__(self):
        return f"TransportFailure(message={self.message})"


class Result:
    """
    Outcome of a record operation

    Holds the decoded payload and, when the operation did not succeed,
    a StoreFailure or TransportFailure. Dictionary-like access reads
    from the payload, so error documents can still be inspected directly.

    Example:
        >>> result = source.create("posts", {"title": "a post"})
        >>> if result.succeeded:
        ...     print(result.id, result.rev)
        >>> elif result.get("error") == "conflict":
        ...     print(result.reason)
    """

    def __init__(self, payload: Any = None, failure=None):
        self.payload = payload
        self.failure = failure

    @classmethod
    def from_payload(cls, payload: Any) -> "Result":
        """Classify a decoded response"""
        if payload is None:
            return cls(None, TransportFailure("Empty or undecodable response"))
        if isinstance(payload, dict) and "error" in payload:
            return cls(payload, StoreFailure(payload["error"], payload.get("reason")))
        return cls(payload)

    @classmethod
    def from_error(cls, error: TransportError) -> "Result":
        return cls(None, TransportFailure(error.message, error.status_code))

    @property
    def succeeded(self) -> bool:
        return self.failure is None

    @property
    def store_failed(self) -> bool:
        return isinstance(self.failure, StoreFailure)

    @property
    def transport_failed(self) -> bool:
        return isinstance(self.failure, TransportFailure)

    # Typed accessors

    @property
    def id(self) -> Optional[str]:
        return self.get("id", self.get("_id"))

    @property
    def rev(self) -> Optional[str]:
        return self.get("rev", self.get("_rev"))

    @property
    def rows(self) -> List[Dict[str, Any]]:
        return self.get("rows", [])

    @property
    def error(self) -> Optional[str]:
        return self.failure.error if self.store_failed else None

    @property
    def reason(self) -> Optional[str]:
        return self.failure.reason if self.store_failed else None

    def raise_for_failure(self) -> "Result":
        """
        Raise the failure as an exception, if any

        Returns:
            self, for chaining

        Raises:
            StoreError: Server returned an error document
            TransportError: No usable response
        """
        if self.store_failed:
            raise StoreError(
                f"{self.failure.error}: {self.failure.reason}",
                error=self.failure.error,
                reason=self.failure.reason
            )
        if self.transport_failed:
            raise TransportError(self.failure.message, status_code=self.failure.status_code)
        return self

    def get(self, key: str, default=None):
        """Dictionary-like get method"""
        if isinstance(self.payload, dict):
            return self.payload.get(key, default)
        return default

    def __getitem__(self, key):
        """Dictionary-like access"""
        if self.payload is None:
            raise KeyError(key)
        return self.payload[key]

    def __contains__(self, key) -> bool:
        return isinstance(self.payload, dict) and key in self.payload

    def __bool__(self) -> bool:
        return self.succeeded

    def to_dict(self) -> Dict[str, Any]:
        """Payload as a dictionary (empty for non-document payloads)"""
        return dict(self.payload) if isinstance(self.payload, dict) else {}

    def __repr__(self):
        return f"Result(payload={self.payload!r}, failure={self.failure!r})"
