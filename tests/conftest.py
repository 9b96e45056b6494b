"""Pytest fixtures for api-managers tests."""

import pytest

from api_managers.models import (
    NewPolygonPayload,
    PartialDRPayload,
    UsageLog,
    UsageLogBillingType,
    UsageLogMetricFamily,
    UsageLogMetricTypes,
    UsageLogSource,
)


class RecordingLogger:
    """Logger double that keeps every record for assertions."""

    def __init__(self):
        self.records = []

    def _record(self, level, message, **extra):
        self.records.append((level, message, extra))

    def debug(self, message, **extra):
        self._record("DEBUG", message, **extra)

    def info(self, message, **extra):
        self._record("INFO", message, **extra)

    def warning(self, message, **extra):
        self._record("WARNING", message, **extra)

    def error(self, message, **extra):
        self._record("ERROR", message, **extra)

    def messages(self, level):
        return [message for lvl, message, _ in self.records if lvl == level]


@pytest.fixture
def logger():
    """Recording logger."""
    return RecordingLogger()


@pytest.fixture
def polygon():
    """A metered high-resolution polygon."""
    return NewPolygonPayload(
        id="field-1",
        version="v2",
        area=12.5,
        count=1,
        country="FR",
        mgrs="31UDQ",
    )


@pytest.fixture
def pdr_tile():
    """A delivered partial-DR imagery tile."""
    return PartialDRPayload(
        subscription_id="sub-42",
        version="v1",
        area=3.25,
        date="2024-01-15",
        data_source="sentinel-2",
        mgrs="31UDQ",
    )


@pytest.fixture
def high_res_log(polygon):
    """DF_HIGH_RES usage log billed by area."""
    return UsageLog(
        request_id="req-1",
        source=UsageLogSource(
            type=UsageLogMetricTypes.DF_HIGH_RES,
            metric=UsageLogMetricFamily.NEW_POLYGONS_FILTER,
            billing_type=UsageLogBillingType.AREA,
        ),
        organization_id="org-1",
        api_key_id="key-1",
        time_stamp=1705329000000,
        date="2024-01-15",
        payload=[polygon],
    )


@pytest.fixture
def low_res_log():
    """DF_LOW_RES usage log without payload."""
    return UsageLog(
        request_id="req-2",
        source=UsageLogSource(
            type=UsageLogMetricTypes.DF_LOW_RES,
            metric=UsageLogMetricFamily.SUM,
        ),
        organization_id="org-2",
        api_key_id="key-2",
        time_stamp=1705329060000,
        date="2024-01-15",
    )
