"""
Have I Been Pwned API client.

Dispatches one request per query to the HIBP API:
- Breaches for an account
- All breached sites, optionally filtered by domain
- A single breached site
- Data classes
- Pastes for an account
- Pwned password check (interpreted by status code only)

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import asyncio
import json
import logging
import ssl
from urllib.parse import quote, urlencode

import aiohttp

from breachwatch.config import DEFAULT_API_BASE, HIBPConfig
from breachwatch.hibp.models import (
    InvocationParameters,
    PasswordOutcome,
    QueryResult,
    ResultStatus,
    ValidationType,
)

logger = logging.getLogger(__name__)

_ssl_context: ssl.SSLContext | None = None


def get_ssl_context() -> ssl.SSLContext:
    """Return the shared TLS context, refusing anything below TLS 1.2."""
    global _ssl_context
    if _ssl_context is None:
        context = ssl.create_default_context()
        context.minimum_version = ssl.TLSVersion.TLSv1_2
        _ssl_context = context
    return _ssl_context


def _segment(value: str) -> str:
    # Keep '@' readable in account paths; everything else reserved is escaped.
    return quote(value, safe="@")


def resolve_endpoint(params: InvocationParameters, api_base: str = DEFAULT_API_BASE) -> str:
    """Build the request URL for a query.

    Args:
        params: Validated invocation parameters
        api_base: API base URL

    Returns:
        Fully formed request URL
    """
    base = api_base.rstrip("/")
    vtype = params.validation_type

    if vtype is ValidationType.BREACHED_ACCOUNT:
        return f"{base}/breachedaccount/{_segment(params.email_address)}"
    if vtype is ValidationType.ALL_BREACHED_SITES:
        if params.domain:
            return f"{base}/breaches?{urlencode({'domain': params.domain})}"
        return f"{base}/breaches"
    if vtype is ValidationType.SINGLE_BREACHED_SITE:
        return f"{base}/breach/{_segment(params.site_name)}"
    if vtype is ValidationType.DATA_CLASSES:
        return f"{base}/dataclasses"
    if vtype is ValidationType.ALL_PASTES:
        return f"{base}/pasteaccount/{_segment(params.email_address)}"
    if vtype is ValidationType.PWNED_PASSWORDS:
        return f"{base}/pwnedpassword/{_segment(params.password)}"

    raise ValueError(f"Unsupported validation type: {vtype}")


def _loggable_url(url: str, params: InvocationParameters) -> str:
    if params.validation_type is ValidationType.PWNED_PASSWORDS:
        return url.rsplit("/", 1)[0] + "/*****"
    return url


class HIBPClient:
    """Client for the Have I Been Pwned API.

    Each query resolves to exactly one GET request. Remote and transport
    failures are returned as a tagged QueryResult instead of raised.
    """

    def __init__(
        self,
        config: HIBPConfig | None = None,
        session: aiohttp.ClientSession | None = None,
    ):
        """Initialize HIBP client.

        Args:
            config: Client configuration (default: loaded from environment)
            session: Existing HTTP session to use instead of creating one
        """
        self.config = config or HIBPConfig.from_env()
        self._session = session
        self._owns_session = session is None

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure HTTP session exists."""
        if self._session is None or self._session.closed:
            connector = aiohttp.TCPConnector(ssl=get_ssl_context())
            self._session = aiohttp.ClientSession(connector=connector)
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Close HTTP session if this client created it."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> "HIBPClient":
        """Async context manager entry."""
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()

    def _headers(self) -> dict[str, str]:
        headers = {"User-Agent": self.config.user_agent}
        if self.config.api_key:
            headers["hibp-api-key"] = self.config.api_key
        return headers

    def resolve_endpoint(self, params: InvocationParameters) -> str:
        """Build the request URL using the configured API base."""
        return resolve_endpoint(params, self.config.api_base)

    async def query(self, params: InvocationParameters) -> QueryResult:
        """Validate parameters, then resolve and execute the request.

        Raises:
            ValueError: If the parameters are invalid for the mode. No
                request is made in that case.
        """
        errors = params.validate()
        if errors:
            raise ValueError("; ".join(errors))

        url = self.resolve_endpoint(params)
        return await self.execute(url, params)

    async def execute(self, url: str, params: InvocationParameters) -> QueryResult:
        """Issue the GET request and interpret the response.

        Args:
            url: Request URL from resolve_endpoint
            params: Parameters the URL was built from

        Returns:
            QueryResult tagged SUCCESS, NOT_FOUND or ERROR
        """
        vtype = params.validation_type
        session = await self._ensure_session()

        logger.info(f"GET {_loggable_url(url, params)}")

        body = None
        try:
            async with session.get(url, headers=self._headers()) as response:
                status = response.status
                if vtype.returns_data and 200 <= status < 300:
                    body = await response.read()
        except asyncio.TimeoutError:
            return self._failure(url, params, None, "Request timeout")
        except aiohttp.ClientError as e:
            return self._failure(url, params, None, f"Request failed: {e}")

        logger.debug(f"{vtype.value} returned HTTP {status}")

        if vtype is ValidationType.PWNED_PASSWORDS:
            return self._password_result(url, status)

        if not 200 <= status < 300:
            return self._failure(url, params, status, f"HTTP {status}")

        if not body or not body.strip():
            data = None
        else:
            try:
                data = json.loads(body.decode("utf-8"))
            except ValueError as e:
                # UnicodeDecodeError and JSONDecodeError are both ValueErrors
                return self._failure(url, params, status, f"Malformed response body: {e}")

        return QueryResult(
            validation_type=vtype,
            url=url,
            status=ResultStatus.SUCCESS,
            status_code=status,
            data=data,
        )

    def _password_result(self, url: str, status: int) -> QueryResult:
        outcome = PasswordOutcome.from_status(status)

        if outcome is PasswordOutcome.PWNED:
            result_status = ResultStatus.SUCCESS
        elif outcome is PasswordOutcome.NOT_PWNED:
            result_status = ResultStatus.NOT_FOUND
        else:
            result_status = ResultStatus.ERROR

        if outcome is PasswordOutcome.FAILED:
            message = f"{outcome.message}: HTTP {status}"
        else:
            message = outcome.message

        if result_status is ResultStatus.ERROR:
            logger.warning(message)

        return QueryResult(
            validation_type=ValidationType.PWNED_PASSWORDS,
            url=url,
            status=result_status,
            status_code=status,
            message=message,
            password_outcome=outcome,
        )

    def _failure(
        self,
        url: str,
        params: InvocationParameters,
        status: int | None,
        detail: str,
    ) -> QueryResult:
        vtype = params.validation_type

        if vtype is ValidationType.PWNED_PASSWORDS:
            outcome = PasswordOutcome.FAILED
            message = f"{outcome.message}: {detail}"
        else:
            outcome = None
            if vtype is ValidationType.SINGLE_BREACHED_SITE:
                message = f"{params.site_name} was not found."
            else:
                message = f"{params.subject} was not found: {detail}"

        logger.warning(message)

        return QueryResult(
            validation_type=vtype,
            url=url,
            status=ResultStatus.NOT_FOUND if status == 404 else ResultStatus.ERROR,
            status_code=status,
            message=message,
            password_outcome=outcome,
        )


def run_query(
    params: InvocationParameters,
    config: HIBPConfig | None = None,
) -> QueryResult:
    """Synchronous wrapper for a single HIBP query.

    Args:
        params: Invocation parameters
        config: Client configuration

    Returns:
        QueryResult
    """
    async def _run():
        async with HIBPClient(config=config) as client:
            return await client.query(params)

    return asyncio.run(_run())
