"""
Adapter: Trade post repository.

Implements TradePostRepository port, including the geospatial discovery
query (page + total count over the same predicate) and the like-count
ranking. Runs on the SQLAlchemy connection of the current unit of work.
"""

import logging
from collections import defaultdict
from typing import Optional

from sqlalchemy import Float, and_, delete, func, insert, or_, select, update
from sqlalchemy.engine import Connection, Row
from sqlalchemy.sql import Select

from app.domain.market.discovery import LIKE_ESCAPE_CHAR, DiscoveryCriteria
from app.domain.market.entities import (
    Coordinate,
    TradePost,
    TradePostParties,
    TradePostSummary,
    TradeStatus,
)
from app.domain.market.ports import TradePostRepository
from app.infrastructure.market.schema import (
    like_posts,
    trade_post_images,
    trade_posts,
    users,
)
from app.infrastructure.market.user_repository import row_to_user

logger = logging.getLogger(__name__)

seller_alias = users.alias("seller")
buyer_alias = users.alias("buyer")


def row_to_post(row: Row, images: list[str]) -> TradePost:
    """Map a row carrying every ``trade_posts`` column to a TradePost."""
    m = row._mapping
    return TradePost(
        id=m["id"],
        title=m["title"],
        description=m["description"],
        price=m["price"],
        seller_id=m["seller_id"],
        buyer_id=m["buyer_id"],
        status=TradeStatus(m["status"]),
        view_count=m["view_count"],
        coordinate=Coordinate(m["latitude"], m["longitude"]),
        images=images,
        created_at=m["created_at"],
        modified_at=m["modified_at"],
    )


class TradePostRepositoryAdapter(TradePostRepository):
    """Stores trade posts in ``trade_posts`` and ``trade_post_images``."""

    def __init__(self, conn: Connection) -> None:
        self._conn = conn

    # ── single-post reads ────────────────────────────────────────

    def get_by_id(self, post_id: int) -> Optional[TradePost]:
        row = self._conn.execute(
            select(trade_posts).where(trade_posts.c.id == post_id)
        ).first()
        if row is None:
            return None
        return row_to_post(row, self._load_images([post_id])[post_id])

    def get_with_seller_and_buyer(self, post_id: int) -> Optional[TradePostParties]:
        """Resolve post, seller and buyer with one joined SELECT."""
        query = (
            select(
                trade_posts,
                *[c.label(f"seller__{c.name}") for c in seller_alias.c],
                *[c.label(f"buyer__{c.name}") for c in buyer_alias.c],
            )
            .select_from(
                trade_posts.join(
                    seller_alias, seller_alias.c.id == trade_posts.c.seller_id
                ).outerjoin(buyer_alias, buyer_alias.c.id == trade_posts.c.buyer_id)
            )
            .where(trade_posts.c.id == post_id)
        )
        row = self._conn.execute(query).first()
        if row is None:
            return None

        post = row_to_post(row, self._load_images([post_id])[post_id])
        buyer = row_to_user(row, "buyer__") if row.buyer_id is not None else None
        return TradePostParties(post=post, seller=row_to_user(row, "seller__"), buyer=buyer)

    # ── writes ───────────────────────────────────────────────────

    def add(self, post: TradePost) -> TradePost:
        result = self._conn.execute(insert(trade_posts).values(**self._values(post)))
        post.id = result.inserted_primary_key[0]
        self._insert_images(post.id, post.images)
        logger.debug("Inserted trade post id=%d", post.id)
        return post

    def update(self, post: TradePost) -> None:
        values = self._values(post)
        # view_count only moves through increment_view_count
        del values["view_count"], values["created_at"]
        self._conn.execute(
            update(trade_posts).where(trade_posts.c.id == post.id).values(**values)
        )
        self._conn.execute(
            delete(trade_post_images).where(trade_post_images.c.post_id == post.id)
        )
        self._insert_images(post.id, post.images)

    def delete(self, post_id: int) -> None:
        self._conn.execute(delete(like_posts).where(like_posts.c.post_id == post_id))
        self._conn.execute(
            delete(trade_post_images).where(trade_post_images.c.post_id == post_id)
        )
        self._conn.execute(delete(trade_posts).where(trade_posts.c.id == post_id))

    def increment_view_count(self, post_id: int) -> None:
        self._conn.execute(
            update(trade_posts)
            .where(trade_posts.c.id == post_id)
            .values(view_count=trade_posts.c.view_count + 1)
        )

    # ── discovery ────────────────────────────────────────────────

    def find_nearby(
        self, criteria: DiscoveryCriteria, viewer_id: int
    ) -> list[TradePostSummary]:
        """Return one newest-first page of posts within the viewer's radius."""
        if criteria.is_empty_area:
            return []
        query = (
            self._summary_select(viewer_id)
            .where(*self._nearby_conditions(criteria))
            .order_by(trade_posts.c.created_at.desc(), trade_posts.c.id.desc())
            .limit(criteria.limit)
            .offset(criteria.offset)
        )
        return self._summaries(query)

    def count_nearby(self, criteria: DiscoveryCriteria) -> int:
        if criteria.is_empty_area:
            return 0
        query = (
            select(func.count())
            .select_from(trade_posts)
            .where(*self._nearby_conditions(criteria))
        )
        return int(self._conn.execute(query).scalar_one())

    # ── listings ─────────────────────────────────────────────────

    def find_by_seller(self, seller_id: int, viewer_id: int) -> list[TradePostSummary]:
        query = (
            self._summary_select(viewer_id)
            .where(trade_posts.c.seller_id == seller_id)
            .order_by(trade_posts.c.created_at.asc(), trade_posts.c.id.asc())
        )
        return self._summaries(query)

    def find_by_buyer(self, buyer_id: int, viewer_id: int) -> list[TradePostSummary]:
        query = (
            self._summary_select(viewer_id)
            .where(
                trade_posts.c.buyer_id == buyer_id,
                trade_posts.c.status == TradeStatus.COMPLETED.value,
            )
            .order_by(trade_posts.c.created_at.asc(), trade_posts.c.id.asc())
        )
        return self._summaries(query)

    def find_liked_by(self, liker_id: int) -> list[TradePostSummary]:
        liked = like_posts.alias("liked")
        query = (
            self._summary_select(
                liker_id,
                join=(
                    liked,
                    and_(liked.c.post_id == trade_posts.c.id, liked.c.user_id == liker_id),
                ),
            )
            .order_by(liked.c.created_at.asc(), liked.c.id.asc())
        )
        return self._summaries(query)

    def find_top_liked(self, limit: int, viewer_id: int) -> list[TradePostSummary]:
        query = (
            self._summary_select(viewer_id)
            .order_by(self._like_count().desc(), trade_posts.c.id.asc())
            .limit(limit)
        )
        return self._summaries(query)

    # ── helpers ──────────────────────────────────────────────────

    @staticmethod
    def _like_count():
        return (
            select(func.count())
            .select_from(like_posts)
            .where(like_posts.c.post_id == trade_posts.c.id)
            .correlate(trade_posts)
            .scalar_subquery()
        )

    def _summary_select(self, viewer_id: int, join: Optional[tuple] = None) -> Select:
        """Select post columns plus seller name, like count and viewer like flag.

        Args:
            viewer_id: User the ``viewer_likes`` column is computed for.
            join: Optional ``(table, onclause)`` inner-joined to narrow the rows.
        """
        viewer_likes = (
            select(func.count())
            .select_from(like_posts)
            .where(
                like_posts.c.post_id == trade_posts.c.id,
                like_posts.c.user_id == viewer_id,
            )
            .correlate(trade_posts)
            .scalar_subquery()
        )
        source = trade_posts.join(users, users.c.id == trade_posts.c.seller_id)
        if join is not None:
            source = source.join(*join)
        return select(
            trade_posts,
            users.c.username.label("seller_username"),
            self._like_count().label("like_count"),
            viewer_likes.label("viewer_likes"),
        ).select_from(source)

    @staticmethod
    def _nearby_conditions(criteria: DiscoveryCriteria) -> list:
        distance = func.haversine_km(
            criteria.origin.latitude,
            criteria.origin.longitude,
            trade_posts.c.latitude,
            trade_posts.c.longitude,
            type_=Float,
        )
        conditions = [distance <= criteria.radius_km]

        pattern = criteria.pattern
        if pattern is not None:
            conditions.append(
                or_(
                    func.lower(trade_posts.c.title).like(pattern, escape=LIKE_ESCAPE_CHAR),
                    func.lower(trade_posts.c.description).like(
                        pattern, escape=LIKE_ESCAPE_CHAR
                    ),
                )
            )
        if criteria.trading_only:
            conditions.append(trade_posts.c.status != TradeStatus.COMPLETED.value)
        return conditions

    def _summaries(self, query: Select) -> list[TradePostSummary]:
        rows = self._conn.execute(query).fetchall()
        images = self._load_images([row.id for row in rows])
        return [
            TradePostSummary(
                post=row_to_post(row, images[row.id]),
                seller_username=row.seller_username,
                like_count=int(row.like_count),
                is_liked=bool(row.viewer_likes),
            )
            for row in rows
        ]

    def _load_images(self, post_ids: list[int]) -> dict[int, list[str]]:
        images: dict[int, list[str]] = defaultdict(list)
        if not post_ids:
            return images
        rows = self._conn.execute(
            select(trade_post_images.c.post_id, trade_post_images.c.url)
            .where(trade_post_images.c.post_id.in_(post_ids))
            .order_by(trade_post_images.c.post_id, trade_post_images.c.position)
        ).fetchall()
        for row in rows:
            images[row.post_id].append(row.url)
        return images

    def _insert_images(self, post_id: int, urls: list[str]) -> None:
        if not urls:
            return
        self._conn.execute(
            insert(trade_post_images),
            [
                {"post_id": post_id, "url": url, "position": position}
                for position, url in enumerate(urls)
            ],
        )

    @staticmethod
    def _values(post: TradePost) -> dict:
        return {
            "title": post.title,
            "description": post.description,
            "price": post.price,
            "seller_id": post.seller_id,
            "buyer_id": post.buyer_id,
            "status": post.status.value,
            "view_count": post.view_count,
            "latitude": post.coordinate.latitude,
            "longitude": post.coordinate.longitude,
            "created_at": post.created_at,
            "modified_at": post.modified_at,
        }
