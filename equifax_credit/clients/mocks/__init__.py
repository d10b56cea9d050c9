"""
Mock gateway clients.

These clients return fake (but realistic) replies without calling the bureau.
They are used when:
- the bureau endpoint or a bureau-issued certificate is not available
- we want to test the exchange end-to-end without external dependencies

Important:
- Mock clients must follow the SAME interface as real HTTP clients.
- Replies are shaped according to equifax_credit/contracts/*
"""

from .gateway import MockGatewayTransport

__all__ = ["MockGatewayTransport"]
