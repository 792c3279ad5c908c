"""
Schiphol Public Flight API client.

Handles communication with the Schiphol REST API, including:
- App id / app key header authentication
- Single-page and paginated queries
- Per-request timeouts and retry with exponential backoff
- Read-through response caching

Response format (v4):
    {
        "flights": [ {...}, {...} ],
        "meta": {...}            # optional
    }

Pagination has no reliable end marker: the provider keeps serving pages
until one comes back empty, so a hard page ceiling bounds every
multi-page fetch.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Optional, List, Callable, Any

import requests

from pierwatch.cache import ResponseCache, cache_key, response_cache
from pierwatch.config import config

logger = logging.getLogger(__name__)


class FlightDataError(Exception):
    """Base class for failures fetching flight data."""


class TransportError(FlightDataError):
    """Timeout or connection failure. Safe to retry."""


class ParseError(FlightDataError):
    """Response body was not valid JSON."""


class UpstreamError(FlightDataError):
    """Provider answered with a non-success HTTP status."""

    def __init__(self, status: int, message: Optional[str] = None):
        self.status = status
        super().__init__(message or f'Schiphol API error: {status}')


class RateLimitedError(UpstreamError):
    """429: rate limit exceeded."""


class UnauthorizedError(UpstreamError):
    """401: invalid app id / app key."""


class ForbiddenError(UpstreamError):
    """403: credentials lack permission for this resource."""


class UpstreamTimeoutError(UpstreamError):
    """408 / 504: the provider timed out upstream."""


_STATUS_ERRORS = {
    429: (RateLimitedError, 'Rate limit exceeded. Please try again later.'),
    401: (UnauthorizedError, 'Invalid API credentials. Check SCHIPHOL_APP_ID and SCHIPHOL_APP_KEY.'),
    403: (ForbiddenError, 'Access forbidden. Check API permissions.'),
    408: (UpstreamTimeoutError, 'Request timeout. The API is taking too long to respond.'),
    504: (UpstreamTimeoutError, 'Request timeout. The API is taking too long to respond.'),
}


def error_for_status(status: int, reason: str = '') -> UpstreamError:
    """Map an HTTP status to its typed UpstreamError."""
    if status in _STATUS_ERRORS:
        error_cls, message = _STATUS_ERRORS[status]
        return error_cls(status, message)
    return UpstreamError(status, f'Schiphol API error: {status} {reason}'.strip())


@dataclass
class FlightQuery:
    """
    Shape of a flights request.

    direction is the API code ('D' or 'A'); schedule_date is YYYY-MM-DD.
    """
    direction: Optional[str] = None
    airline: Optional[str] = None
    schedule_date: Optional[str] = None
    fetch_all_pages: bool = False

    def to_params(self, page: Optional[int] = None) -> dict:
        """Convert to Schiphol API query parameters."""
        params = {}
        if self.direction:
            params['flightDirection'] = self.direction
        if self.airline:
            params['airline'] = self.airline
        if self.schedule_date:
            params['scheduleDate'] = self.schedule_date
        if page is not None:
            params['page'] = str(page)
        return params


@dataclass
class FlightsResponse:
    """Raw flights payload as returned (or accumulated) from the API."""
    flights: List[dict] = field(default_factory=list)
    meta: dict = field(default_factory=dict)

    @classmethod
    def from_json(cls, data: Any) -> 'FlightsResponse':
        if not isinstance(data, dict):
            raise ParseError(f'Unexpected response type: {type(data).__name__}')
        flights = data.get('flights') or []
        if not isinstance(flights, list):
            raise ParseError('Response "flights" is not a list')
        return cls(flights=flights, meta=data.get('meta') or {})

    def to_dict(self) -> dict:
        return {'flights': self.flights, 'meta': self.meta}


class SchipholClient:
    """
    Client for the Schiphol Public Flight API.

    Handles:
    - GET requests to the /flights endpoint
    - Pagination until an empty page or the page ceiling
    - Retry with exponential backoff on transport failures (multi-page only)
    - Writing results into the shared response cache
    """

    def __init__(
        self,
        app_id: Optional[str] = None,
        app_key: Optional[str] = None,
        base_url: str = 'https://api.schiphol.nl/public-flights',
        resource_version: str = 'v4',
        timeout: float = 15.0,
        max_attempts: int = 2,
        retry_delay: float = 0.5,
        max_pages: int = 50,
        page_delay: float = 0.05,
        cache: Optional[ResponseCache] = None,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.max_attempts = max(1, max_attempts)
        self.retry_delay = retry_delay
        self.max_pages = max_pages
        self.page_delay = page_delay
        self.cache = cache if cache is not None else response_cache
        self._sleep = sleep

        if not (app_id and app_key):
            logger.warning('Schiphol client running without credentials - requests will be rejected')

        self.session = session or requests.Session()
        self.session.headers.update({
            'Accept': 'application/json',
            'app_id': app_id or '',
            'app_key': app_key or '',
            'ResourceVersion': resource_version,
        })

        self._request_count = 0

    @classmethod
    def from_config(cls) -> 'SchipholClient':
        """Create client from application configuration."""
        return cls(
            app_id=config.schiphol.app_id,
            app_key=config.schiphol.app_key,
            base_url=config.schiphol.base_url,
            resource_version=config.schiphol.resource_version,
            timeout=config.fetch.timeout_seconds,
            max_attempts=config.fetch.max_attempts,
            retry_delay=config.fetch.retry_delay_seconds,
            max_pages=config.fetch.max_pages,
            page_delay=config.fetch.page_delay_seconds,
        )

    def fetch(self, query: FlightQuery) -> FlightsResponse:
        """
        Fetch flights, serving a fresh cached response when available.

        Raises:
            TransportError, UpstreamError (and subclasses), ParseError
        """
        key = cache_key(query)
        cached = self.cache.get(key)
        if cached is not None:
            logger.info(f'Using cached Schiphol API data for {key}')
            return cached

        if query.fetch_all_pages:
            result = self._fetch_all_pages(query)
        else:
            result = self._fetch_page(query.to_params())

        self.cache.put(key, result)
        return result

    def _request(self, params: dict) -> requests.Response:
        """
        Issue one GET bounded by the timeout.

        requests applies the timeout to the connect and to each socket read,
        not to the whole exchange. A response that keeps trickling in can
        take longer than `timeout` in total.
        """
        url = f'{self.base_url}/flights'
        logger.debug(f'Calling Schiphol API: {url} params={params}')

        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            logger.error(f'Schiphol API timeout after {self.timeout}s')
            raise TransportError(f'Request timed out after {self.timeout}s') from e
        except requests.exceptions.RequestException as e:
            logger.error(f'Schiphol request failed: {e}')
            raise TransportError(str(e)) from e
        finally:
            self._request_count += 1

        return response

    def _parse(self, response: requests.Response) -> FlightsResponse:
        """Check status and decode the JSON body."""
        if not response.ok:
            if response.status_code == 429:
                logger.warning('Schiphol API rate limit exceeded')
            else:
                logger.error(
                    f'Schiphol API error: {response.status_code} {response.reason} {response.text[:200]}'
                )
            raise error_for_status(response.status_code, response.reason or '')

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f'Failed to parse Schiphol API response: {e}')
            raise ParseError(f'Malformed JSON response: {e}') from e

        return FlightsResponse.from_json(data)

    def _fetch_page(self, params: dict) -> FlightsResponse:
        """Single request, no retry: every failure is surfaced to the caller."""
        result = self._parse(self._request(params))
        logger.info(f'Received {len(result.flights)} flights from Schiphol API')
        return result

    def _fetch_page_with_retry(self, params: dict, page: int) -> requests.Response:
        """
        Request one page, retrying transport failures with exponential backoff.

        Waits retry_delay * 2**n before retry n (0.5s, 1s, 2s, ...).
        HTTP error statuses are returned, not retried.
        """
        for attempt in range(1, self.max_attempts + 1):
            try:
                return self._request(params)
            except TransportError as e:
                logger.warning(f'Page {page} attempt {attempt} failed: {e}')
                if attempt >= self.max_attempts:
                    logger.error(f'Failed to fetch page {page} after {self.max_attempts} attempts')
                    raise
                self._sleep(self.retry_delay * 2 ** (attempt - 1))

        raise AssertionError('unreachable')

    def _fetch_all_pages(self, query: FlightQuery) -> FlightsResponse:
        """
        Fetch pages 0, 1, 2, ... until an empty page or max_pages.

        A transport failure that survives retries aborts the whole fetch and
        discards pages already read. An error status or unparseable body on
        a later page ends pagination early with the pages read so far.
        """
        all_flights: List[dict] = []
        truncated = False
        page = 0

        logger.info('Fetching all pages of Schiphol API data...')

        while page < self.max_pages:
            response = self._fetch_page_with_retry(query.to_params(page=page), page)

            try:
                result = self._parse(response)
            except (UpstreamError, ParseError) as e:
                if page == 0:
                    raise
                logger.warning(f'Abandoning pagination at page {page}: {e}')
                truncated = True
                break

            logger.debug(f'Page {page}: {len(result.flights)} flights')

            # An empty page marks the end of the data
            if not result.flights:
                break

            all_flights.extend(result.flights)
            page += 1

            if page < self.max_pages:
                self._sleep(self.page_delay)
        else:
            logger.warning(f'Stopped pagination at the {self.max_pages} page limit')

        logger.info(f'Total flights fetched: {len(all_flights)} from {page} pages')

        meta = {'totalCount': len(all_flights), 'pages': page}
        if truncated:
            meta['truncated'] = True
        return FlightsResponse(flights=all_flights, meta=meta)

    @property
    def stats(self) -> dict:
        return {'requests': self._request_count}
