import json

import httpx
import pytest

from buffbucks.models.domain.fitness_domain import DayWindow
from buffbucks.services.google.fitness_client import (
    ACTIVITY_METRICS,
    CALORIES_EXPENDED,
    STEP_COUNT,
    GoogleFitnessService,
    build_aggregate_body,
)
from tests.conftest import (
    ACCESS_TOKEN,
    CALORIES_TYPE,
    DAY_END,
    DAY_START,
    HEART_TYPE,
    STEPS_TYPE,
    aggregate_payload,
)

WINDOW = DayWindow(start_time_millis=DAY_START, end_time_millis=DAY_END)


def test_aggregate_body_covers_day_window_in_one_bucket():
    body = build_aggregate_body(STEP_COUNT, WINDOW)

    assert body == {
        "aggregateBy": [
            {
                "dataTypeName": "com.google.step_count.delta",
                "dataSourceId": (
                    "derived:com.google.step_count.delta:com.google.android.gms:estimated_steps"
                ),
            }
        ],
        "bucketByTime": {"durationMillis": 86_400_000},
        "startTimeMillis": DAY_START,
        "endTimeMillis": DAY_END,
    }


def test_each_metric_has_distinct_data_source():
    assert len({metric.data_type_name for metric in ACTIVITY_METRICS}) == 3
    assert len({metric.data_source_id for metric in ACTIVITY_METRICS}) == 3


@pytest.mark.asyncio
async def test_fetch_activity_totals_sums_each_metric(upstream, http_client, test_settings):
    upstream.metrics[STEPS_TYPE] = (200, aggregate_payload([4000, 2500], "intVal"))
    upstream.metrics[CALORIES_TYPE] = (200, aggregate_payload([1800.5, 200.0], "fpVal"))
    upstream.metrics[HEART_TYPE] = (200, aggregate_payload([12.0, 8.0], "fpVal"))
    service = GoogleFitnessService(http_client, test_settings)

    totals = await service.fetch_activity_totals(ACCESS_TOKEN, WINDOW)

    assert totals.steps == 6500
    assert totals.calories == pytest.approx(2000.5)
    assert totals.heart_points == pytest.approx(20.0)


@pytest.mark.asyncio
async def test_fetch_activity_totals_issues_one_post_per_metric(
    upstream, http_client, test_settings
):
    service = GoogleFitnessService(http_client, test_settings)

    await service.fetch_activity_totals(ACCESS_TOKEN, WINDOW)

    posts = upstream.requests_for("POST")
    assert len(posts) == 3
    assert str(posts[0].url) == test_settings.GOOGLE_FITNESS_AGGREGATE_URL
    requested_types = {json.loads(p.content)["aggregateBy"][0]["dataTypeName"] for p in posts}
    assert requested_types == {STEPS_TYPE, CALORIES_TYPE, HEART_TYPE}
    for request in posts:
        assert request.headers["Authorization"] == f"Bearer {ACCESS_TOKEN}"
        assert request.headers["Content-Type"] == "application/json"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "failure",
    [
        (500, {"error": {"code": 500, "message": "backend error"}}),
        (200, {"error": {"code": 403, "message": "denied"}}),
        (200, "<html>not json</html>"),
        httpx.ConnectError("connection refused"),
    ],
)
async def test_failed_metric_counts_as_zero(failure, upstream, http_client, test_settings):
    upstream.metrics[STEPS_TYPE] = (200, aggregate_payload([9000], "intVal"))
    upstream.metrics[CALORIES_TYPE] = failure
    upstream.metrics[HEART_TYPE] = (200, aggregate_payload([30.0], "fpVal"))
    service = GoogleFitnessService(http_client, test_settings)

    totals = await service.fetch_activity_totals(ACCESS_TOKEN, WINDOW)

    assert totals.steps == 9000
    assert totals.calories == 0
    assert totals.heart_points == 30.0


@pytest.mark.asyncio
async def test_fetch_metric_total_empty_buckets(upstream, http_client, test_settings):
    service = GoogleFitnessService(http_client, test_settings)

    total = await service.fetch_metric_total(ACCESS_TOKEN, CALORIES_EXPENDED, WINDOW)

    assert total == 0


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        aggregate_payload([1e308, 1e308], "fpVal"),
        '{"bucket": [{"dataset": [{"point": [{"value": [{"fpVal": NaN}]}]}]}]}',
        '{"bucket": [{"dataset": [{"point": [{"value": [{"fpVal": 1e400}]}]}]}]}',
    ],
)
async def test_non_finite_metric_total_counts_as_zero(
    payload, upstream, http_client, test_settings
):
    upstream.metrics[CALORIES_TYPE] = (200, payload)
    upstream.metrics[HEART_TYPE] = (200, aggregate_payload([50.0], "fpVal"))
    service = GoogleFitnessService(http_client, test_settings)

    totals = await service.fetch_activity_totals(ACCESS_TOKEN, WINDOW)

    assert totals.calories == 0
    assert totals.heart_points == 50.0


@pytest.mark.asyncio
async def test_int_total_too_large_for_float_counts_as_zero(upstream, http_client, test_settings):
    upstream.metrics[STEPS_TYPE] = (200, aggregate_payload([10**400], "intVal"))
    service = GoogleFitnessService(http_client, test_settings)

    total = await service.fetch_metric_total(ACCESS_TOKEN, STEP_COUNT, WINDOW)

    assert total == 0


@pytest.mark.asyncio
async def test_metric_queries_are_in_flight_together(
    upstream, in_flight_transport, concurrent_client, test_settings
):
    upstream.metrics[STEPS_TYPE] = (200, aggregate_payload([10000], "intVal"))
    service = GoogleFitnessService(concurrent_client, test_settings)

    totals = await service.fetch_activity_totals(ACCESS_TOKEN, WINDOW)

    assert totals.steps == 10000
    assert in_flight_transport.peak == 3
    assert len(upstream.requests_for("POST")) == 3
