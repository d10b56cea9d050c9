from abc import ABC, abstractmethod
from typing import Optional


class GatewayTransport(ABC):
    """Every synchronous gateway transport must implement this interface."""

    @abstractmethod
    def send(self, envelope: bytes, endpoint: str, timeout: Optional[float] = None) -> bytes:
        """POST a signed envelope and return the raw reply body.

        Raises RequestRejectedError for a non-2xx status and
        TransportFailureError (or TransportTimeoutError) for network failures.
        """


class AsyncGatewayTransport(ABC):
    """Asyncio counterpart of :class:`GatewayTransport`."""

    @abstractmethod
    async def send(self, envelope: bytes, endpoint: str, timeout: Optional[float] = None) -> bytes:
        """Same contract as :meth:`GatewayTransport.send`."""
