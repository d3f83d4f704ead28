import asyncio
import json

import httpx
import pytest
import pytest_asyncio

from buffbucks.config import Settings

DAY_START = 1_700_006_400_000
DAY_END = DAY_START + 86_400_000
USER_EMAIL = "runner@example.com"
ACCESS_TOKEN = "ya29.test-token"

STEPS_TYPE = "com.google.step_count.delta"
CALORIES_TYPE = "com.google.calories.expended"
HEART_TYPE = "com.google.heart_minutes"


def aggregate_payload(values: list, kind: str) -> dict:
    """Single-bucket aggregate response with one point per value."""
    return {
        "bucket": [
            {
                "startTimeMillis": str(DAY_START),
                "endTimeMillis": str(DAY_END),
                "dataset": [{"point": [{"value": [{kind: value}]} for value in values]}],
            }
        ]
    }


class FakeUpstream:
    """Records outbound requests and answers them with canned responses.

    A response entry is either ``(status_code, payload)`` or an exception
    instance to raise from the transport.
    """

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.identity = (200, {"email": USER_EMAIL, "verified_email": True})
        self.day_window = (200, {"startTime": DAY_START, "endTime": DAY_END})
        self.metrics = {
            STEPS_TYPE: (200, {"bucket": []}),
            CALORIES_TYPE: (200, {"bucket": []}),
            HEART_TYPE: (200, {"bucket": []}),
        }

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.method == "POST":
            body = json.loads(request.content)
            entry = self.metrics[body["aggregateBy"][0]["dataTypeName"]]
        elif request.url.host == "www.googleapis.com":
            entry = self.identity
        else:
            entry = self.day_window

        if isinstance(entry, Exception):
            raise entry
        status_code, payload = entry
        if isinstance(payload, str):
            return httpx.Response(status_code, text=payload)
        return httpx.Response(status_code, json=payload)

    def requests_for(self, method: str) -> list[httpx.Request]:
        return [request for request in self.requests if request.method == method]


class InFlightTransport(httpx.AsyncBaseTransport):
    """Answers from a FakeUpstream after a short delay, tracking peak concurrency."""

    def __init__(self, upstream: FakeUpstream, delay: float = 0.05):
        self.upstream = upstream
        self.delay = delay
        self.in_flight = 0
        self.peak = 0

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        self.in_flight += 1
        self.peak = max(self.peak, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
            return self.upstream.handle(request)
        finally:
            self.in_flight -= 1


@pytest.fixture
def test_settings():
    return Settings(environment="test")


@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest_asyncio.fixture
async def http_client(upstream):
    async with httpx.AsyncClient(transport=httpx.MockTransport(upstream.handle)) as client:
        yield client


@pytest.fixture
def in_flight_transport(upstream):
    return InFlightTransport(upstream)


@pytest_asyncio.fixture
async def concurrent_client(in_flight_transport):
    async with httpx.AsyncClient(transport=in_flight_transport) as client:
        yield client
