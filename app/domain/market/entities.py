"""
Domain entities for the market bounded context.

Entities represent core business objects with identity and lifecycle.
They contain no framework imports and no IO operations.
Relations between entities are held as ids, never as object references.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from app.domain.market.errors import DomainValidationError

DEFAULT_TEMPERATURE = 36.5
DEFAULT_SEARCH_RADIUS_KM = 3.0


def utcnow() -> datetime:
    """Return the current UTC time as a naive datetime (storage convention)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class TradeStatus(Enum):
    """Lifecycle of a trade post."""

    TRADING = "TRADING"
    RESERVATION = "RESERVATION"
    COMPLETED = "COMPLETED"


@dataclass(frozen=True)
class Coordinate:
    """A WGS84 point in decimal degrees."""

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        if not -90.0 <= self.latitude <= 90.0:
            raise DomainValidationError(f"Latitude out of range: {self.latitude}")
        if not -180.0 <= self.longitude <= 180.0:
            raise DomainValidationError(f"Longitude out of range: {self.longitude}")


@dataclass
class User:
    """A marketplace member.

    Attributes:
        username: Unique display name.
        email: Unique email address.
        password_hash: Hashed password, never the raw value.
        location: Free-text neighbourhood label.
        coordinate: Where the user browses from.
        temperature: Reputation score ("manner temperature").
        search_radius_km: Discovery radius around ``coordinate``.
    """

    username: str
    email: str
    password_hash: str
    location: str
    coordinate: Coordinate
    temperature: float = DEFAULT_TEMPERATURE
    search_radius_km: float = DEFAULT_SEARCH_RADIUS_KM
    img_url: Optional[str] = None
    id: Optional[int] = None
    created_at: datetime = field(default_factory=utcnow)
    modified_at: datetime = field(default_factory=utcnow)


@dataclass
class TradePost:
    """A listing offered for sale by ``seller_id``."""

    title: str
    description: str
    price: int
    seller_id: int
    coordinate: Coordinate
    buyer_id: Optional[int] = None
    status: TradeStatus = TradeStatus.TRADING
    view_count: int = 0
    images: list[str] = field(default_factory=list)
    id: Optional[int] = None
    created_at: datetime = field(default_factory=utcnow)
    modified_at: datetime = field(default_factory=utcnow)

    def __post_init__(self) -> None:
        validate_title(self.title)
        validate_price(self.price)

    def is_owned_by(self, user_id: int) -> bool:
        return self.seller_id == user_id

    def touch(self) -> None:
        self.modified_at = utcnow()


@dataclass
class LikePost:
    """Interest of ``liker_id`` in trade post ``post_id``."""

    liker_id: int
    post_id: int
    id: Optional[int] = None
    created_at: datetime = field(default_factory=utcnow)


@dataclass
class NeighborPost:
    """Community feed content."""

    content: str
    publisher_id: int
    id: Optional[int] = None
    created_at: datetime = field(default_factory=utcnow)
    modified_at: datetime = field(default_factory=utcnow)

    def __post_init__(self) -> None:
        validate_content(self.content)

    def is_owned_by(self, user_id: int) -> bool:
        return self.publisher_id == user_id


@dataclass
class NeighborLike:
    """Interest of ``liker_id`` in neighbor post ``post_id``."""

    liker_id: int
    post_id: int
    id: Optional[int] = None
    created_at: datetime = field(default_factory=utcnow)


@dataclass(frozen=True)
class TradePostSummary:
    """Read model: a trade post as seen by a given viewer."""

    post: TradePost
    seller_username: str
    like_count: int
    is_liked: bool


@dataclass(frozen=True)
class TradePostParties:
    """Read model: a trade post with its seller and buyer resolved together."""

    post: TradePost
    seller: User
    buyer: Optional[User]


@dataclass(frozen=True)
class NeighborPostSummary:
    """Read model: a neighbor post as seen by a given viewer."""

    post: NeighborPost
    publisher_username: str
    like_count: int
    is_liked: bool


def validate_title(title: str) -> None:
    if not title or not title.strip():
        raise DomainValidationError("Title must not be blank")


def validate_price(price: int) -> None:
    if price < 0:
        raise DomainValidationError(f"Price must not be negative: {price}")


def validate_content(content: str) -> None:
    if not content or not content.strip():
        raise DomainValidationError("Content must not be blank")
