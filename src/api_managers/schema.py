"""DynamoDB single-table key schema: key builders and the key decoder."""

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

# Key attribute names
PK = "PK"
SK = "SK"

# Secondary index keyed on SK (organization/token lookups)
SK_INDEX_NAME = "SK-index"

# Key prefixes
KEYID_PREFIX = "KEYID#"
APITYPE_PREFIX = "APITYPE#"
DATE_PREFIX = "DATE#"
ORG_PREFIX = "ORG#"
USERID_PREFIX = "USERID#"
TOKENID_PREFIX = "TOKENID#"

# Sort key prefix for querying all organizations of a user
SK_ORG_PREFIX = ORG_PREFIX

# Version segment of token sort keys
TOKEN_VERSION = "V0"

# Discriminator of the multi-valued set wrapper
SET_WRAPPER_NAME = "Set"


def pk_user(user_id: str) -> str:
    """Build partition key for a user."""
    return f"{USERID_PREFIX}{user_id}"


def sk_org(organization_id: str) -> str:
    """Build sort key for an organization membership."""
    return f"{ORG_PREFIX}{organization_id}"


def sk_token(token_id: str) -> str:
    """Build sort key for an API token."""
    return f"{TOKENID_PREFIX}{TOKEN_VERSION}#{token_id}"


def pk_key_api_type(key_id: str, api_type: str) -> str:
    """Build partition key for an API key scoped to an API type."""
    return f"{KEYID_PREFIX}{key_id}#{APITYPE_PREFIX}{api_type}"


def sk_date(date: str) -> str:
    """Build sort key for a calendar date (YYYY-MM-DD)."""
    return f"{DATE_PREFIX}{date}"


@dataclass(frozen=True)
class KeyPattern:
    """
    One entry of the key pattern table.

    A pattern either names a single output field (``field``) for its one
    capture group, or carries a ``transform`` turning all capture groups
    into several fields. Only single-field patterns apply to sort keys.
    """

    regex: re.Pattern[str]
    field: str | None = None
    transform: Callable[[tuple[str, ...]], dict[str, str]] | None = None

    def match(self, key: str) -> re.Match[str] | None:
        return self.regex.fullmatch(key)

    def extract(self, match: re.Match[str]) -> dict[str, str]:
        """Derived fields for a successful match."""
        if self.field is not None:
            return {self.field: match.group(1)}
        if self.transform is not None:
            return self.transform(match.groups())
        return {}


def _key_id_api_type(groups: tuple[str, ...]) -> dict[str, str]:
    key_id, api_type = groups
    return {"keyId": key_id, "apiType": api_type}


# Ordered; the first matching entry wins
KEY_PATTERNS: tuple[KeyPattern, ...] = (
    KeyPattern(
        re.compile(r"KEYID#([^#;]+)#APITYPE#([^#;]+)"),
        transform=_key_id_api_type,
    ),
    KeyPattern(re.compile(r"DATE#([^#;]+)"), field="date"),
    KeyPattern(re.compile(r"ORG#([^#;]+)"), field="organizationId"),
    KeyPattern(re.compile(r"USERID#([^#;]+)"), field="userId"),
    KeyPattern(re.compile(r"TOKENID#([^#;]+)"), field="userId"),
)


def match_key(
    key: str | None,
    single_field_only: bool = False,
) -> tuple[KeyPattern, re.Match[str]] | None:
    """Find the first pattern in table order matching the whole key."""
    if not key or not isinstance(key, str):
        return None
    for pattern in KEY_PATTERNS:
        if single_field_only and pattern.field is None:
            continue
        match = pattern.match(key)
        if match:
            return pattern, match
    return None


def is_set_wrapper(value: Any) -> bool:
    """True if the value is a wrapped multi-valued set attribute."""
    return isinstance(value, Mapping) and value.get("wrapperName") == SET_WRAPPER_NAME


def unwrap_value(value: Any) -> Any:
    """Replace a set-wrapped (or native set) value with its plain list of members."""
    if is_set_wrapper(value):
        return value.get("values")
    if isinstance(value, (set, frozenset)):
        # DynamoDB sets are homogeneous, so members are mutually comparable
        return sorted(value)
    return value


def schema_unmarshal(item: Mapping[str, Any] | None) -> dict[str, Any] | None:
    """
    Convert a composite-key record into a flat, semantically named record.

    ``PK`` and ``SK`` are dropped; all other attributes are copied with set
    wrappers unwrapped. Fields derived from the partition key (any pattern)
    and then the sort key (single-field patterns only) are added on top.
    Keys that match no pattern contribute nothing.

    Args:
        item: Record with optional ``PK``/``SK`` strings plus attributes

    Returns:
        The normalized record, or ``item`` itself when it is empty/None
    """
    if not item:
        return item  # type: ignore[return-value]

    result = {key: unwrap_value(value) for key, value in item.items() if key not in (PK, SK)}

    pk_match = match_key(item.get(PK))
    if pk_match:
        pattern, match = pk_match
        result.update(pattern.extract(match))

    sk_match = match_key(item.get(SK), single_field_only=True)
    if sk_match:
        pattern, match = sk_match
        result.update(pattern.extract(match))

    return result
