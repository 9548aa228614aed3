"""
Entity-to-DTO mapping shared by the market use cases.
"""

from typing import Optional

from app.application.market.dtos import (
    NeighborPostResult,
    TradePostResult,
    UserResult,
    UserSummaryResult,
)
from app.domain.market.entities import (
    NeighborPostSummary,
    TradePost,
    TradePostSummary,
    User,
)


def to_user_result(user: User) -> UserResult:
    return UserResult(
        id=user.id,
        username=user.username,
        email=user.email,
        location=user.location,
        latitude=user.coordinate.latitude,
        longitude=user.coordinate.longitude,
        temperature=user.temperature,
        search_radius_km=user.search_radius_km,
        img_url=user.img_url,
        created_at=user.created_at,
        modified_at=user.modified_at,
    )


def to_user_summary(user: Optional[User]) -> Optional[UserSummaryResult]:
    if user is None:
        return None
    return UserSummaryResult(
        id=user.id,
        username=user.username,
        location=user.location,
        temperature=user.temperature,
        img_url=user.img_url,
    )


def to_trade_post_result(
    post: TradePost, seller_username: str, like_count: int, is_liked: bool
) -> TradePostResult:
    return TradePostResult(
        post_id=post.id,
        title=post.title,
        description=post.description,
        price=post.price,
        status=post.status.value,
        view_count=post.view_count,
        image_urls=list(post.images),
        latitude=post.coordinate.latitude,
        longitude=post.coordinate.longitude,
        seller_id=post.seller_id,
        seller_username=seller_username,
        buyer_id=post.buyer_id,
        like_count=like_count,
        is_liked=is_liked,
        created_at=post.created_at,
        modified_at=post.modified_at,
    )


def summary_to_result(summary: TradePostSummary) -> TradePostResult:
    return to_trade_post_result(
        summary.post, summary.seller_username, summary.like_count, summary.is_liked
    )


def neighbor_summary_to_result(summary: NeighborPostSummary) -> NeighborPostResult:
    post = summary.post
    return NeighborPostResult(
        post_id=post.id,
        content=post.content,
        publisher_id=post.publisher_id,
        publisher_username=summary.publisher_username,
        like_count=summary.like_count,
        is_liked=summary.is_liked,
        created_at=post.created_at,
        modified_at=post.modified_at,
    )
