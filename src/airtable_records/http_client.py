from __future__ import annotations
import sys, uuid
from typing import Any, Optional, Type

import httpx

from .config import DEFAULT_ROOT_URL, DEFAULT_VERSION, rate_limit_disabled
from .envelope import find_error
from .errors import RequestError, SetupError, TransportError
from .query import Options, encode_options
from .ratelimit import RateLimiter
from .resource import Resource


class Client:
    """
    - Low-level Airtable request client:
      - `{root}/{version}/{base_id}/{endpoint}?{query}` URLs
      - bearer auth + X-Request-Id per request
      - shared token-bucket rate limit (5 req/s unless disabled)
      - one GET per call, no retries
      - error envelopes raised as RequestError, raw bytes kept
    The httpx.AsyncClient is supplied by the caller; timeouts live there.
    """

    def __init__(
        self,
        api_key: str,
        base_id: str,
        http: Optional[httpx.AsyncClient],
        *,
        version: str = DEFAULT_VERSION,
        root_url: str = DEFAULT_ROOT_URL,
        limiter: Optional[RateLimiter] = None,
        no_limit: Optional[bool] = None,
    ):
        self.api_key = api_key
        self.base_id = base_id
        self.http = http
        self.version = version
        self.root_url = root_url
        self.limiter = limiter or RateLimiter()
        self.no_limit = no_limit

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        if self.http is not None:
            await self.http.aclose()

    def check_setup(self) -> None:
        if not self.base_id:
            raise SetupError("airtable: Client missing BaseID")
        if not self.api_key:
            raise SetupError("airtable: Client missing APIKey")
        if self.http is None:
            raise SetupError("airtable: missing HTTP client")
        if not self.version:
            self.version = DEFAULT_VERSION
        if not self.root_url:
            self.root_url = DEFAULT_ROOT_URL

    def make_url(self, endpoint: str, options: Options = None) -> str:
        root = self.root_url.rstrip("/")
        return f"{root}/{self.version}/{self.base_id}/{endpoint.lstrip('/')}?{encode_options(options)}"

    def limited(self) -> bool:
        return not (self.no_limit or rate_limit_disabled())

    def table(self, name: str, record_type: Type[Any]) -> Resource:
        return Resource(name, self, record_type)

    async def request_bytes(self, method: str, endpoint: str, options: Options = None, **kwargs) -> bytes:
        """
        Make one raw request and return the body.
        Raises SetupError before touching the network, TransportError for
        httpx failures and RequestError when the body is an error envelope.
        """
        self.check_setup()
        if method.upper() != "GET":
            raise ValueError(f"only GET requests are supported, got {method!r}")

        url = self.make_url(endpoint, options)
        req_id = kwargs.pop("req_id", str(uuid.uuid4()))
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "X-Request-Id": req_id,
        }

        if self.limited():
            await self.limiter.take()

        try:
            resp = await self.http.request("GET", url, headers=headers)
            body = resp.content
        except httpx.HTTPError as e:
            print(f"[req#{req_id}] [fatal] GET {url}: {e}", file=sys.stderr)
            raise TransportError(f"GET {url}: {e}") from e

        err = find_error(body)
        if err is not None:
            err_type, message = err
            status = getattr(resp, "status_code", None)
            print(f"[req#{req_id}] GET {url} returned {status} {err_type}: {message}", file=sys.stderr)
            raise RequestError(message, err_type, raw=body, status_code=status)
        return body
