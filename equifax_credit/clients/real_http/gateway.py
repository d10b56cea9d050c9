"""
Bureau gateway HTTP transport.

Purpose:
- POSTs the signed request envelope to the gateway endpoint
- Returns the raw reply body (still a signed envelope) to the caller

Implementation notes:
- requests for the blocking client, httpx for the asyncio client
- A non-2xx status is a rejection: the body is not trusted to be an envelope
  and is only attached to the error for diagnostics
- One round trip per call; retries are the caller's decision because a
  resent request is a new application

Important:
- Keep this module as the ONLY place where gateway HTTP calls are made.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional, Union

import httpx
import requests

from equifax_credit.contracts.interfaces import AsyncGatewayTransport, GatewayTransport
from equifax_credit.errors import RequestRejectedError, TransportFailureError, TransportTimeoutError

logger = logging.getLogger(__name__)

CONTENT_TYPE = "application/octet-stream"
MAX_ERROR_BODY = 4096


def _headers() -> Dict[str, str]:
    return {"Content-Type": CONTENT_TYPE, "Accept": CONTENT_TYPE}


def _is_success(status_code: int) -> bool:
    return 200 <= status_code < 300


class HttpGatewayTransport(GatewayTransport):
    def __init__(
        self,
        timeout_seconds: float = 30.0,
        session: Optional[requests.Session] = None,
        verify: Union[bool, str] = True,
    ) -> None:
        self.timeout_seconds = timeout_seconds
        self.session = session
        self.verify = verify

    def send(self, envelope: bytes, endpoint: str, timeout: Optional[float] = None) -> bytes:
        timeout = self.timeout_seconds if timeout is None else timeout
        post = self.session.post if self.session is not None else requests.post
        logger.info(f"Posting {len(envelope)}-byte envelope to {endpoint}")
        try:
            response = post(endpoint, data=envelope, headers=_headers(), timeout=timeout, verify=self.verify)
        except requests.exceptions.Timeout as exc:
            logger.error(f"Timed out after {timeout}s waiting for gateway {endpoint}: {exc}")
            raise TransportTimeoutError(f"Gateway {endpoint} did not answer within {timeout}s") from exc
        except requests.exceptions.RequestException as exc:
            logger.error(f"Request error connecting to gateway {endpoint}: {type(exc).__name__} - {exc}")
            raise TransportFailureError(f"Cannot reach gateway {endpoint}: {exc}") from exc

        if not _is_success(response.status_code):
            logger.error(f"Gateway {endpoint} rejected the request: HTTP {response.status_code}")
            raise RequestRejectedError(response.status_code, response.content[:MAX_ERROR_BODY])

        logger.info(f"Received gateway reply: status={response.status_code} size={len(response.content)}")
        return response.content


class AsyncHttpGatewayTransport(AsyncGatewayTransport):
    def __init__(
        self,
        timeout_seconds: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
        verify: Union[bool, str] = True,
    ) -> None:
        self.timeout_seconds = timeout_seconds
        self.client = client
        self.verify = verify

    async def send(self, envelope: bytes, endpoint: str, timeout: Optional[float] = None) -> bytes:
        timeout = self.timeout_seconds if timeout is None else timeout
        logger.info(f"Posting {len(envelope)}-byte envelope to {endpoint}")
        try:
            if self.client is not None:
                response = await self.client.post(endpoint, content=envelope, headers=_headers(), timeout=timeout)
            else:
                async with httpx.AsyncClient(timeout=timeout, verify=self.verify) as client:
                    response = await client.post(endpoint, content=envelope, headers=_headers())
        except httpx.TimeoutException as exc:
            logger.error(f"Timed out after {timeout}s waiting for gateway {endpoint}: {exc}")
            raise TransportTimeoutError(f"Gateway {endpoint} did not answer within {timeout}s") from exc
        except httpx.RequestError as exc:
            logger.error(f"Request error connecting to gateway {endpoint}: {type(exc).__name__} - {exc}")
            raise TransportFailureError(f"Cannot reach gateway {endpoint}: {exc}") from exc

        if not _is_success(response.status_code):
            logger.error(f"Gateway {endpoint} rejected the request: HTTP {response.status_code}")
            raise RequestRejectedError(response.status_code, response.content[:MAX_ERROR_BODY])

        logger.info(f"Received gateway reply: status={response.status_code} size={len(response.content)}")
        return response.content
