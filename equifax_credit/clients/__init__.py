"""
Gateway transports: the real HTTP clients and a mock bureau gateway.
"""

from .mocks import MockGatewayTransport
from .real_http import AsyncHttpGatewayTransport, HttpGatewayTransport

__all__ = ["AsyncHttpGatewayTransport", "HttpGatewayTransport", "MockGatewayTransport"]
