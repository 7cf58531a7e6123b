import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from .config import METRIC_LOOKBACK_HOURS, METRIC_INTERVAL
from .models import MetricSample


def _get_iso8601_timespan(lookback_hours: int) -> str:
    """Generates an ISO 8601 compliant timespan string (start/end)."""
    now_utc = datetime.now(timezone.utc)
    start_utc = now_utc - timedelta(hours=lookback_hours)
    return f"{start_utc.strftime('%Y-%m-%dT%H:%M:%SZ')}/{now_utc.strftime('%Y-%m-%dT%H:%M:%SZ')}"


def get_latest_metric(monitor_client, resource_id: str, metric_name: str, aggregation: str,
                      lookback_hours: int = METRIC_LOOKBACK_HOURS) -> Optional[MetricSample]:
    """Returns the most recent data point of a metric for one statistic.

    The statistic read from each point follows ``aggregation`` ("Average" ->
    ``point.average``, "Maximum" -> ``point.maximum``). Points without a value
    for that statistic are passed over. Returns None when the series holds no
    usable point, which callers treat as a zero reading. API errors propagate.
    """
    logger = logging.getLogger()
    attr = aggregation.lower()

    metrics_data = monitor_client.metrics.list(
        resource_uri=resource_id,
        timespan=_get_iso8601_timespan(lookback_hours),
        interval=METRIC_INTERVAL,
        metricnames=metric_name,
        aggregation=aggregation
    )

    if not metrics_data or not metrics_data.value:
        logger.debug(f"No metric data returned for '{metric_name}' on {resource_id}.")
        return None

    time_series = metrics_data.value[0].timeseries
    if not time_series or not time_series[0].data:
        logger.debug(f"No time series data for '{metric_name}' on {resource_id}.")
        return None

    for point in reversed(time_series[0].data):
        value = getattr(point, attr, None)
        if value is not None:
            logger.debug(f"Latest {aggregation} '{metric_name}' on {resource_id}: {value} at {point.time_stamp}")
            return MetricSample(
                resource_id=resource_id,
                metric_name=metric_name,
                aggregation=aggregation,
                value=value,
                timestamp=point.time_stamp,
            )

    logger.debug(f"No valid '{metric_name}' data points for {resource_id} in the timespan.")
    return None
