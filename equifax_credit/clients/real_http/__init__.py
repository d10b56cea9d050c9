"""
Real HTTP gateway clients.

These transports talk to the bureau gateway over the network.

Important:
- Must implement the same interfaces as the mock transports
  (equifax_credit/contracts/interfaces.py)
"""

from .gateway import AsyncHttpGatewayTransport, HttpGatewayTransport

__all__ = ["AsyncHttpGatewayTransport", "HttpGatewayTransport"]
