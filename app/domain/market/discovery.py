"""
Domain service: Geospatial discovery criteria.

Pure logic for the nearby-listings query:
    - Great-circle (haversine) distance between two coordinates
    - Keyword sanitizing for LIKE containment patterns
    - Criteria validation (page size, offset, radius)

The repository executes the criteria; this module decides what they mean.
"""

import math
from dataclasses import dataclass

from app.domain.market.entities import Coordinate, TradePostSummary
from app.domain.market.errors import DomainValidationError

EARTH_RADIUS_KM = 6371.0088
LIKE_ESCAPE_CHAR = "\\"


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Return the great-circle distance in kilometres between two points."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)
    a = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(min(1.0, a)))


def distance_km(a: Coordinate, b: Coordinate) -> float:
    return haversine_km(a.latitude, a.longitude, b.latitude, b.longitude)


def normalize_keyword(keyword: str | None) -> str:
    """Trim and lower-case a search keyword. ``None`` means no filter."""
    return (keyword or "").strip().lower()


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so user input only ever matches literally."""
    return (
        value.replace(LIKE_ESCAPE_CHAR, LIKE_ESCAPE_CHAR * 2)
        .replace("%", LIKE_ESCAPE_CHAR + "%")
        .replace("_", LIKE_ESCAPE_CHAR + "_")
    )


def containment_pattern(keyword: str | None) -> str | None:
    """Build a ``%keyword%`` LIKE pattern, or None when there is no keyword."""
    normalized = normalize_keyword(keyword)
    if not normalized:
        return None
    return f"%{escape_like(normalized)}%"


def validate_paging(limit: int, offset: int) -> None:
    if limit <= 0:
        raise DomainValidationError(f"Page size must be positive: {limit}")
    if offset < 0:
        raise DomainValidationError(f"Offset must not be negative: {offset}")


@dataclass(frozen=True)
class DiscoveryCriteria:
    """Predicate and window of a nearby-listings query.

    Attributes:
        origin: Viewer coordinate.
        radius_km: Maximum great-circle distance from ``origin``.
        keyword: Raw keyword; matched against title and description.
        limit: Page size.
        offset: Rows to skip.
        trading_only: Exclude COMPLETED posts when True.
    """

    origin: Coordinate
    radius_km: float
    keyword: str = ""
    limit: int = 20
    offset: int = 0
    trading_only: bool = False

    def __post_init__(self) -> None:
        validate_paging(self.limit, self.offset)

    @property
    def pattern(self) -> str | None:
        return containment_pattern(self.keyword)

    @property
    def is_empty_area(self) -> bool:
        """A non-positive radius can never match anything."""
        return self.radius_km <= 0


@dataclass(frozen=True)
class DiscoveryPage:
    """One page of discovery results plus the unpaginated match count."""

    posts: list[TradePostSummary]
    total: int
    limit: int
    offset: int

    @property
    def page(self) -> int:
        return self.offset // self.limit

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.total else 0
