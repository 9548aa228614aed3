"""
Pydantic schemas for market API request/response validation.

These schemas enforce input validation and define the API contract.
No business logic belongs here.
"""

from datetime import datetime

from pydantic import BaseModel, Field

USERNAME_MAX_LEN = 30
TITLE_MAX_LEN = 100
DESCRIPTION_MAX_LEN = 5_000
CONTENT_MAX_LEN = 5_000
MAX_IMAGES = 10
PASSWORD_MIN_LEN = 8
# Row ids are signed 64-bit integers in every supported database.
ID_MAX = 2**63 - 1


class HealthResponse(BaseModel):
    """Response schema for the health check endpoint."""

    status: str
    version: str
    database: str


class ErrorResponse(BaseModel):
    """Standard error response returned by all error handlers."""

    error: str
    detail: str | None = None


# ------------------------------------------------------------------
# Users
# ------------------------------------------------------------------


class RegisterUserRequest(BaseModel):
    """Request schema for account creation.

    Attributes:
        username: Unique display name (1-30 chars).
        email: Unique email address.
        password: Raw password, at least 8 chars.
        location: Neighbourhood label.
        latitude: Home latitude in decimal degrees.
        longitude: Home longitude in decimal degrees.
    """

    username: str = Field(..., min_length=1, max_length=USERNAME_MAX_LEN)
    email: str = Field(..., min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=128)
    location: str = Field(..., min_length=1, max_length=100)
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class EditUsernameRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=USERNAME_MAX_LEN)


class EditLocationRequest(BaseModel):
    location: str = Field(..., min_length=1, max_length=100)
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class EditSearchRadiusRequest(BaseModel):
    radius_km: float = Field(..., gt=0, description="Discovery radius in kilometres")


class EditPasswordRequest(BaseModel):
    current_password: str = Field(..., min_length=1, max_length=128)
    new_password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=128)
    confirm_password: str = Field(..., min_length=1, max_length=128)


class UserResponse(BaseModel):
    """Response schema for a member profile."""

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


class UserSummaryItem(BaseModel):
    """A user as shown next to a post or in a ranking."""

    id: int
    username: str
    location: str
    temperature: float
    img_url: str | None


# ------------------------------------------------------------------
# Trade posts
# ------------------------------------------------------------------


class CreateTradePostRequest(BaseModel):
    """Request schema for listing an item.

    Attributes:
        title: Listing title (1-100 chars).
        description: Free text.
        price: Asking price, non-negative.
        image_urls: Already-uploaded image references, at most 10.
        latitude: Optional listing latitude; defaults to the seller's.
        longitude: Optional listing longitude; defaults to the seller's.
    """

    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LEN)
    description: str = Field(default="", max_length=DESCRIPTION_MAX_LEN)
    price: int = Field(..., ge=0)
    image_urls: list[str] = Field(default_factory=list, max_length=MAX_IMAGES)
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)


class UpdateTradePostRequest(BaseModel):
    """Request schema for editing a listing. Omitted fields are unchanged."""

    title: str | None = Field(default=None, min_length=1, max_length=TITLE_MAX_LEN)
    description: str | None = Field(default=None, max_length=DESCRIPTION_MAX_LEN)
    price: int | None = Field(default=None, ge=0)
    image_urls: list[str] | None = Field(default=None, max_length=MAX_IMAGES)


class ReserveTradePostRequest(BaseModel):
    buyer_id: int = Field(..., ge=1, le=ID_MAX, description="User the item is reserved for")


class TradePostItem(BaseModel):
    """A trade post as seen by the caller."""

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


class TradePostDetailResponse(BaseModel):
    post: TradePostItem
    seller: UserSummaryItem
    buyer: UserSummaryItem | None


class TradePostPageResponse(BaseModel):
    """One page of nearby listings plus the total number of matches."""

    posts: list[TradePostItem]
    page: int
    size: int
    total: int
    total_pages: int


class ReservationResponse(BaseModel):
    post_id: int
    status: str
    seller: UserSummaryItem
    buyer: UserSummaryItem | None


class LikeToggleResponse(BaseModel):
    post_id: int
    liked: bool
    like_count: int


# ------------------------------------------------------------------
# Neighbor posts
# ------------------------------------------------------------------


class NeighborPostRequest(BaseModel):
    content: str = Field(..., min_length=1, max_length=CONTENT_MAX_LEN)


class NeighborPostItem(BaseModel):
    """A neighbor post as seen by the caller."""

    post_id: int
    content: str
    publisher_id: int
    publisher_username: str
    like_count: int
    is_liked: bool
    created_at: datetime
    modified_at: datetime
