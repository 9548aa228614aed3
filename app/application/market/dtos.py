"""
Data Transfer Objects for the market application layer.

DTOs carry data between the interface and application layers.
They are plain dataclasses with no behavior.
"""

from dataclasses import dataclass, field
from datetime import datetime


# ------------------------------------------------------------------
# User DTOs
# ------------------------------------------------------------------


@dataclass(frozen=True)
class RegisterUserCommand:
    """Input DTO for creating a member account.

    Attributes:
        username: Unique display name.
        email: Unique email address.
        password: Raw password; hashed before it is stored.
        location: Neighbourhood label.
        latitude: Home latitude in decimal degrees.
        longitude: Home longitude in decimal degrees.
    """

    username: str
    email: str
    password: str
    location: str
    latitude: float
    longitude: float


@dataclass(frozen=True)
class EditUsernameCommand:
    user_id: int
    username: str


@dataclass(frozen=True)
class EditLocationCommand:
    user_id: int
    location: str
    latitude: float
    longitude: float


@dataclass(frozen=True)
class EditSearchRadiusCommand:
    user_id: int
    radius_km: float


@dataclass(frozen=True)
class EditPasswordCommand:
    """Input DTO for a password change.

    Attributes:
        user_id: Account being changed.
        current_password: Must verify against the stored hash.
        new_password: Replacement password.
        confirm_password: Must equal ``new_password``.
    """

    user_id: int
    current_password: str
    new_password: str
    confirm_password: str


@dataclass(frozen=True)
class UserPostsQuery:
    """Input DTO for a user's activity lists.

    Attributes:
        viewer_id: Caller; drives the ``is_liked`` flag of each post.
        user_id: Whose posts are listed.
    """

    viewer_id: int
    user_id: int


@dataclass(frozen=True)
class UserResult:
    """Output DTO for a member profile. Never carries the password hash."""

    id: int
    username: str
    email: str
    location: str
    latitude: float
    longitude: float
    temperature: float
    search_radius_km: float
    img_url: str | None
    created_at: datetime
    modified_at: datetime


@dataclass(frozen=True)
class UserSummaryResult:
    """Output DTO for a user shown next to a post."""

    id: int
    username: str
    location: str
    temperature: float
    img_url: str | None


# ------------------------------------------------------------------
# Trade post DTOs
# ------------------------------------------------------------------


@dataclass(frozen=True)
class CreateTradePostCommand:
    """Input DTO for listing an item.

    Attributes:
        user_id: Seller.
        title: Listing title.
        description: Free-text description.
        price: Asking price, non-negative.
        image_urls: Already-uploaded image references, in display order.
        latitude: Optional listing latitude; defaults to the seller's.
        longitude: Optional listing longitude; defaults to the seller's.
    """

    user_id: int
    title: str
    description: str
    price: int
    image_urls: list[str] = field(default_factory=list)
    latitude: float | None = None
    longitude: float | None = None


@dataclass(frozen=True)
class UpdateTradePostCommand:
    """Input DTO for editing a listing. ``None`` keeps the current value."""

    user_id: int
    post_id: int
    title: str | None = None
    description: str | None = None
    price: int | None = None
    image_urls: list[str] | None = None


@dataclass(frozen=True)
class TradePostActionCommand:
    """Input DTO naming a caller and a trade post (get, delete, like, ...)."""

    user_id: int
    post_id: int


@dataclass(frozen=True)
class ReserveTradePostCommand:
    seller_id: int
    buyer_id: int
    post_id: int


@dataclass(frozen=True)
class DiscoverTradePostsQuery:
    """Input DTO for browsing nearby listings.

    Attributes:
        user_id: Viewer; their coordinate and search radius bound the area.
        keyword: Optional title/description containment filter.
        page: Zero-based page index.
        size: Page size.
        trading_only: Hide completed trades when True.
    """

    user_id: int
    keyword: str = ""
    page: int = 0
    size: int = 20
    trading_only: bool = False


@dataclass(frozen=True)
class TradePostResult:
    """Output DTO for a trade post as seen by the caller."""

    post_id: int
    title: str
    description: str
    price: int
    status: str
    view_count: int
    image_urls: list[str]
    latitude: float
    longitude: float
    seller_id: int
    seller_username: str
    buyer_id: int | None
    like_count: int
    is_liked: bool
    created_at: datetime
    modified_at: datetime


@dataclass(frozen=True)
class TradePostDetailResult:
    """Output DTO for a single trade post with both parties resolved."""

    post: TradePostResult
    seller: UserSummaryResult
    buyer: UserSummaryResult | None


@dataclass(frozen=True)
class TradePostPageResult:
    """Output DTO for one discovery page."""

    posts: list[TradePostResult]
    page: int
    size: int
    total: int
    total_pages: int


@dataclass(frozen=True)
class ReservationResult:
    """Output DTO for the reservation state of a post."""

    post_id: int
    status: str
    seller: UserSummaryResult
    buyer: UserSummaryResult | None


@dataclass(frozen=True)
class LikeToggleResult:
    post_id: int
    liked: bool
    like_count: int


# ------------------------------------------------------------------
# Neighbor post DTOs
# ------------------------------------------------------------------


@dataclass(frozen=True)
class CreateNeighborPostCommand:
    user_id: int
    content: str


@dataclass(frozen=True)
class UpdateNeighborPostCommand:
    user_id: int
    post_id: int
    content: str


@dataclass(frozen=True)
class NeighborPostActionCommand:
    user_id: int
    post_id: int


@dataclass(frozen=True)
class ListNeighborPostsQuery:
    """Input DTO for the community feed.

    Attributes:
        user_id: Viewer.
        keyword: Optional content containment filter.
        page: Zero-based page index.
        size: Page size.
    """

    user_id: int
    keyword: str = ""
    page: int = 0
    size: int = 20


@dataclass(frozen=True)
class LikedNeighborPostsQuery:
    user_id: int
    page: int = 0
    size: int = 20


@dataclass(frozen=True)
class NeighborPostResult:
    """Output DTO for a neighbor post as seen by the caller."""

    post_id: int
    content: str
    publisher_id: int
    publisher_username: str
    like_count: int
    is_liked: bool
    created_at: datetime
    modified_at: datetime
