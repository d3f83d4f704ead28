"""
Google Fit aggregate client.

Fans out one dataset:aggregate query per activity metric over the resolved day
window and sums each response. Metric failures are soft: a failed query
contributes zero and never aborts the invocation.
"""

import asyncio
import math
from dataclasses import dataclass

import httpx

from buffbucks.config import Settings, settings
from buffbucks.infrastructure.observability.logging import get_logger
from buffbucks.models.domain.fitness_domain import (
    DAY_MILLIS,
    ActivityTotals,
    DayWindow,
    MetricSeries,
    ValueKind,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class FitnessMetric:
    """Aggregate query definition for one activity metric."""

    name: str
    data_type_name: str
    data_source_id: str
    value_kind: ValueKind


STEP_COUNT = FitnessMetric(
    name="steps",
    data_type_name="com.google.step_count.delta",
    data_source_id="derived:com.google.step_count.delta:com.google.android.gms:estimated_steps",
    value_kind=ValueKind.INT,
)
CALORIES_EXPENDED = FitnessMetric(
    name="calories",
    data_type_name="com.google.calories.expended",
    data_source_id=(
        "derived:com.google.calories.expended:com.google.android.gms:merge_calories_expended"
    ),
    value_kind=ValueKind.FLOAT,
)
HEART_MINUTES = FitnessMetric(
    name="heart_points",
    data_type_name="com.google.heart_minutes",
    data_source_id="derived:com.google.heart_minutes:com.google.android.gms:merge_heart_minutes",
    value_kind=ValueKind.FLOAT,
)

ACTIVITY_METRICS = (STEP_COUNT, CALORIES_EXPENDED, HEART_MINUTES)


def build_aggregate_body(metric: FitnessMetric, window: DayWindow) -> dict:
    """Request body aggregating one metric into a single day-long bucket."""
    return {
        "aggregateBy": [
            {
                "dataTypeName": metric.data_type_name,
                "dataSourceId": metric.data_source_id,
            }
        ],
        "bucketByTime": {"durationMillis": DAY_MILLIS},
        "startTimeMillis": window.start_time_millis,
        "endTimeMillis": window.end_time_millis,
    }


class GoogleFitnessService:
    """Service for Google Fit aggregate queries."""

    def __init__(self, client: httpx.AsyncClient, config: Settings = settings):
        self._client = client
        self._url = config.GOOGLE_FITNESS_AGGREGATE_URL

    def _get_auth_headers(self, access_token: str) -> dict:
        return {
            "Authorization": f"Bearer {access_token}",
            "Content-Type": "application/json",
        }

    async def fetch_metric_total(
        self, access_token: str, metric: FitnessMetric, window: DayWindow
    ) -> float:
        """
        Sum one metric over the day window.

        Returns 0 when the query fails in any way.
        """
        try:
            response = await self._client.post(
                self._url,
                headers=self._get_auth_headers(access_token),
                json=build_aggregate_body(metric, window),
            )
        except httpx.RequestError as e:
            logger.warning("Metric request failed", metric=metric.name, error=str(e))
            return 0

        if not response.is_success:
            logger.warning(
                "Metric endpoint returned an error",
                metric=metric.name,
                status_code=response.status_code,
            )
            return 0

        try:
            series = MetricSeries(response.json())
            if series.has_error():
                logger.warning("Metric response carried an error", metric=metric.name)
                return 0
            total = series.total(metric.value_kind)
            finite = math.isfinite(total)
        except (ValueError, TypeError, OverflowError) as e:
            logger.warning("Failed to parse metric response", metric=metric.name, error=str(e))
            return 0

        if not finite:
            logger.warning("Metric total is not finite", metric=metric.name, total=str(total))
            return 0

        logger.info(
            "Metric aggregated", metric=metric.name, total=total, buckets=len(series.buckets)
        )
        return total

    async def fetch_activity_totals(self, access_token: str, window: DayWindow) -> ActivityTotals:
        """Issue all metric queries together and wait for every one to settle."""
        steps, calories, heart_points = await asyncio.gather(
            *(
                self.fetch_metric_total(access_token, metric, window)
                for metric in ACTIVITY_METRICS
            )
        )
        return ActivityTotals(steps=steps, calories=calories, heart_points=heart_points)
