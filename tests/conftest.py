"""Shared fixtures: fake clock, scripted HTTP session, raw flight factory."""

import copy

import pytest

from pierwatch.cache import ResponseCache
from pierwatch.ingestion import SchipholClient


class FakeClock:
    """Manually advanced replacement for time.time."""

    def __init__(self, start: float = 1_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeResponse:
    """Just enough of requests.Response for the client."""

    def __init__(self, status_code=200, json_data=None, text='', reason=''):
        self.status_code = status_code
        self._json = json_data
        self.text = text
        self.reason = reason or ('OK' if status_code < 400 else 'Error')

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._json is None:
            raise ValueError('No JSON object could be decoded')
        return self._json


class FakeSession:
    """
    Serves scripted responses in order.

    Each script item is a FakeResponse, an exception instance (raised), or a
    list of flights (wrapped in a 200 response).
    """

    def __init__(self, script=None, default=None):
        self.script = list(script or [])
        self.default = default
        self.headers = {}
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append({'url': url, 'params': dict(params or {}), 'timeout': timeout})
        if self.script:
            item = self.script.pop(0)
        elif self.default is not None:
            item = self.default
        else:
            raise AssertionError('FakeSession script exhausted')

        if isinstance(item, Exception):
            raise item
        if isinstance(item, list):
            return FakeResponse(200, {'flights': copy.deepcopy(item)})
        return item

    @property
    def pages_requested(self):
        return [c['params'].get('page') for c in self.calls]


def make_raw_flight(**overrides):
    """A well-formed raw Schiphol departure; override any field."""
    flight = {
        'flightName': 'KL1001',
        'flightNumber': 1001,
        'flightDirection': 'D',
        'scheduleDateTime': '2025-06-01T08:15:00.000+02:00',
        'scheduleDate': '2025-06-01',
        'publicEstimatedOffBlockTime': '2025-06-01T08:25:00.000+02:00',
        'publicFlightState': {'flightStates': ['SCH']},
        'aircraftType': {'iataMain': '73H', 'iataSub': '73H'},
        'gate': 'D65',
        'pier': 'D',
        'route': {'destinations': ['LHR']},
        'lastUpdatedAt': '2025-06-01T06:00:00.000+02:00',
        'mainFlight': 'KL1001',
        'prefixIATA': 'KL',
        'prefixICAO': 'KLM',
    }
    flight.update(overrides)
    return flight


@pytest.fixture
def raw_flight():
    return make_raw_flight


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return ResponseCache(cache_duration=600, expiry_window=900, clock=clock)


@pytest.fixture
def sleeps():
    """Records requested sleep durations instead of sleeping."""
    return []


@pytest.fixture
def make_client(cache, sleeps):
    """Build a SchipholClient around a FakeSession with the given script."""

    def _make(script=None, default=None, **kwargs):
        session = FakeSession(script, default=default)
        options = dict(
            app_id='test-id',
            app_key='test-key',
            base_url='https://api.example.test/public-flights',
            timeout=15,
            max_attempts=2,
            retry_delay=0.5,
            max_pages=50,
            page_delay=0.05,
        )
        options.update(kwargs)
        client = SchipholClient(cache=cache, session=session, sleep=sleeps.append, **options)
        return client, session

    return _make
