"""Core models for api-managers."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TypedDict


class UsageLogMetricFamily(Enum):
    """How a usage log is aggregated for billing."""

    SUM = "SUM"
    NEW_POLYGONS_FILTER = "NEW_POLYGONS_FILTER"


class UsageLogBillingType(Enum):
    """Pricing basis of a new-polygon usage log."""

    COUNT = "COUNT"
    AREA = "AREA"
    ZONING_AREA = "ZONING_AREA"


class UsageLogMetricTypes(Enum):
    """The API a usage log originates from."""

    DF_LOW_RES = "DF_LOW_RES"
    DF_HIGH_RES = "DF_HIGH_RES"
    DF_COVERAGE = "DF_COVERAGE"
    DR_COVERAGE = "DR_COVERAGE"
    DR_XYZ = "DR_XYZ"
    DR_BBOX = "DR_BBOX"
    DR_PRE_WMTS_CAP = "DR_PRE_WMTS_CAP"
    DR_PRE_WMTS_TILE = "DR_PRE_WMTS_TILE"
    ZONING = "ZONING"


# Metric family of every metric type
METRIC_FAMILY_BY_TYPE: dict[UsageLogMetricTypes, UsageLogMetricFamily] = {
    metric_type: UsageLogMetricFamily.SUM for metric_type in UsageLogMetricTypes
} | {
    UsageLogMetricTypes.DF_HIGH_RES: UsageLogMetricFamily.NEW_POLYGONS_FILTER,
    UsageLogMetricTypes.ZONING: UsageLogMetricFamily.NEW_POLYGONS_FILTER,
}

# Billing types allowed per metric type; types not listed take none
BILLING_TYPES_BY_TYPE: dict[UsageLogMetricTypes, frozenset[UsageLogBillingType]] = {
    UsageLogMetricTypes.DF_HIGH_RES: frozenset(
        {UsageLogBillingType.AREA, UsageLogBillingType.COUNT}
    ),
    UsageLogMetricTypes.ZONING: frozenset({UsageLogBillingType.ZONING_AREA}),
}

# Metric types whose usage logs may carry a payload
PAYLOAD_METRIC_TYPES: frozenset[UsageLogMetricTypes] = frozenset(
    {
        UsageLogMetricTypes.DF_HIGH_RES,
        UsageLogMetricTypes.ZONING,
        UsageLogMetricTypes.DR_BBOX,
    }
)


def _as_int(value: Any, name: str) -> int:
    """Integral wire number as int; fractional or non-numeric values are rejected."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"{name} must be a number, got {type(value).__name__}")
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(f"{name} must be integral, got {value!r}")
    return int(value)


@dataclass(frozen=True)
class UsageLogSource:
    """
    Classification of a usage log.

    The metric family is fixed by the metric type. Only DF_HIGH_RES
    (AREA or COUNT) and ZONING (ZONING_AREA) carry a billing type.

    Attributes:
        type: The originating API
        metric: How the log is aggregated
        billing_type: Pricing basis, for new-polygon types only
    """

    type: UsageLogMetricTypes
    metric: UsageLogMetricFamily
    billing_type: UsageLogBillingType | None = None

    def __post_init__(self) -> None:
        expected_metric = METRIC_FAMILY_BY_TYPE[self.type]
        if self.metric is not expected_metric:
            raise ValueError(
                f"metric for {self.type.value} must be {expected_metric.value}, "
                f"got {self.metric.value}"
            )
        allowed = BILLING_TYPES_BY_TYPE.get(self.type, frozenset())
        if allowed and self.billing_type not in allowed:
            raise ValueError(
                f"billing_type for {self.type.value} must be one of "
                f"{sorted(b.value for b in allowed)}"
            )
        if not allowed and self.billing_type is not None:
            raise ValueError(f"billing_type is not allowed for {self.type.value}")

    def to_dict(self) -> dict[str, str]:
        """Serialize to the wire dictionary."""
        data = {
            "metric": self.metric.value,
            "type": self.type.value,
        }
        if self.billing_type is not None:
            data["billingType"] = self.billing_type.value
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "UsageLogSource":
        """Deserialize from the wire dictionary."""
        billing_type = data.get("billingType")
        return cls(
            type=UsageLogMetricTypes(data["type"]),
            metric=UsageLogMetricFamily(data["metric"]),
            billing_type=UsageLogBillingType(billing_type) if billing_type else None,
        )


@dataclass(frozen=True)
class NewPolygonPayload:
    """One metered polygon of a new-polygon usage log."""

    id: str
    version: str
    area: float
    count: int
    country: str
    mgrs: str

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the wire dictionary."""
        return {
            "id": self.id,
            "version": self.version,
            "area": self.area,
            "count": self.count,
            "country": self.country,
            "mgrs": self.mgrs,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "NewPolygonPayload":
        """Deserialize from the wire dictionary."""
        return cls(
            id=data["id"],
            version=data["version"],
            area=float(data["area"]),
            count=_as_int(data["count"], "count"),
            country=data["country"],
            mgrs=data["mgrs"],
        )


@dataclass(frozen=True)
class PartialDRPayload:
    """One delivered partial-DR imagery tile of a subscription."""

    subscription_id: str
    version: str
    area: float
    date: str
    data_source: str
    mgrs: str

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the wire dictionary."""
        return {
            "subscriptionId": self.subscription_id,
            "version": self.version,
            "area": self.area,
            "date": self.date,
            "dataSource": self.data_source,
            "mgrs": self.mgrs,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PartialDRPayload":
        """Deserialize from the wire dictionary."""
        return cls(
            subscription_id=data["subscriptionId"],
            version=data["version"],
            area=float(data["area"]),
            date=data["date"],
            data_source=data["dataSource"],
            mgrs=data["mgrs"],
        )


UsageLogPayload = NewPolygonPayload | PartialDRPayload


def payload_from_dict(data: dict[str, Any]) -> UsageLogPayload:
    """Deserialize a payload entry, telling the two shapes apart by their id field."""
    if "subscriptionId" in data:
        return PartialDRPayload.from_dict(data)
    return NewPolygonPayload.from_dict(data)


# Top-level wire keys of a usage log
USAGE_LOG_FIELDS = frozenset(
    {"requestId", "source", "organizationId", "apiKeyId", "timeStamp", "date", "payload"}
)


@dataclass(frozen=True)
class UsageLog:
    """
    One billable usage unit emitted by an API request.

    ``request_id`` identifies the originating request. ``source`` tells
    which API produced the log and how it is aggregated. ``time_stamp`` is
    epoch milliseconds and ``date`` its UTC calendar date (YYYY-MM-DD).

    ``payload`` lists the processed polygons (or partial-DR tiles) and is
    only present for DF_HIGH_RES, ZONING and DR_BBOX sources.
    """

    request_id: str
    source: UsageLogSource
    organization_id: str
    api_key_id: str
    time_stamp: int
    date: str
    payload: tuple[UsageLogPayload, ...] | None = None

    def __post_init__(self) -> None:
        if self.payload is not None:
            if self.source.type not in PAYLOAD_METRIC_TYPES:
                raise ValueError(f"payload is not allowed for {self.source.type.value}")
            # Normalize lists to tuples so the record stays immutable
            object.__setattr__(self, "payload", tuple(self.payload))

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the wire dictionary."""
        data: dict[str, Any] = {
            "requestId": self.request_id,
            "source": self.source.to_dict(),
            "organizationId": self.organization_id,
            "apiKeyId": self.api_key_id,
            "timeStamp": self.time_stamp,
            "date": self.date,
        }
        if self.payload is not None:
            data["payload"] = [entry.to_dict() for entry in self.payload]
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "UsageLog":
        """
        Deserialize from the wire dictionary.

        Raises:
            KeyError: If a required field is missing
            ValueError: If a field has an unknown key or an invalid value
            TypeError: If a numeric field is not a number
        """
        unknown = set(data) - USAGE_LOG_FIELDS
        if unknown:
            raise ValueError(f"unknown usage log fields: {sorted(unknown)}")
        payload = data.get("payload")
        return cls(
            request_id=data["requestId"],
            source=UsageLogSource.from_dict(data["source"]),
            organization_id=data["organizationId"],
            api_key_id=data["apiKeyId"],
            time_stamp=_as_int(data["timeStamp"], "timeStamp"),
            date=data["date"],
            payload=tuple(payload_from_dict(e) for e in payload) if payload is not None else None,
        )


# ---------------------------------------------------------------------------
# Records exchanged with the other managers
# ---------------------------------------------------------------------------


class UserOrganization(TypedDict, total=False):
    """Normalized user/organization record from the single-table store."""

    Token: str
    Type: str
    Name: str
    organizationId: str
    userId: str


@dataclass
class SlackNotificationPayload:
    """A chat message for a Slack channel."""

    text: str
    channel: str


@dataclass
class ViableImageryVerifierPayload:
    """Queue message asking the imagery verifier to check an area."""

    target: str
    message_id: str
    bbox: dict[str, Any]  # GeoJSON Polygon
    check_start_time: str
    check_end_time: str
    problematic_area_percentage: float
    start_time: str
    end_time: str | None = None
    target_payload: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the queue message body."""
        params: dict[str, Any] = {
            "bbox": self.bbox,
            "checkStartTime": self.check_start_time,
            "checkEndTime": self.check_end_time,
            "problematicAreaPercentage": self.problematic_area_percentage,
            "startTime": self.start_time,
        }
        if self.end_time is not None:
            params["endTime"] = self.end_time
        return {
            "targetPayload": self.target_payload,
            "params": params,
            "target": self.target,
            "messageId": self.message_id,
        }


@dataclass
class PartialDRErrorPayload:
    """Queue message reporting a failed partial-DR imagery delivery."""

    target: str
    message_id: str
    imagery_id: str
    failed_at: str  # ISO timestamp
    error_message: str
    target_payload: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the queue message body."""
        return {
            "targetPayload": self.target_payload,
            "params": {
                "imageryId": self.imagery_id,
                "failedAt": self.failed_at,
                "errorMessage": self.error_message,
            },
            "target": self.target,
            "messageId": self.message_id,
        }
