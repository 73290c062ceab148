"""Protocol definitions for the collaborators around the normalization core."""

from typing import Any, Optional, Protocol, runtime_checkable

from foodadmin.core.models import Record
from foodadmin.core.status import StatusTables


@runtime_checkable
class Transport(Protocol):
    """
    Transport protocol: moves raw JSON-like payloads to and from the backend.

    The core never inspects credentials, retries or timeouts; those belong to
    the implementation.
    """

    def get(self, url: str, params: Optional[dict[str, Any]] = None) -> Any:
        """
        Fetch a raw payload.

        Args:
            url: Absolute endpoint URL
            params: Optional query parameters

        Returns:
            Decoded JSON body, or None for an empty body

        Raises:
            TransportError: On network or HTTP failure
        """
        ...

    def send(
        self,
        method: str,
        url: str,
        body: Any = None,
        params: Optional[dict[str, Any]] = None,
    ) -> Any:
        """
        Perform a mutation (POST/PUT/DELETE).

        Args:
            method: HTTP method
            url: Absolute endpoint URL
            body: JSON-serializable request body
            params: Optional query parameters

        Returns:
            Decoded JSON body, or None for an empty body

        Raises:
            TransportError: On network or HTTP failure
        """
        ...


@runtime_checkable
class Normalizer(Protocol):
    """Normalizer protocol: one raw row in, one canonical record out, never raising."""

    def __call__(self, raw: Any, tables: Optional[StatusTables] = None) -> Record:
        ...
