"""
Adapter: Neighbor post repository.

Implements NeighborPostRepository port for the community feed.
Every listing resolves the publisher in the same SELECT.
"""

from typing import Optional

from sqlalchemy import and_, delete, func, insert, select, update
from sqlalchemy.engine import Connection, Row
from sqlalchemy.sql import Select

from app.domain.market.discovery import LIKE_ESCAPE_CHAR
from app.domain.market.entities import NeighborPost, NeighborPostSummary
from app.domain.market.ports import NeighborPostRepository
from app.infrastructure.market.schema import neighbor_likes, neighbor_posts, users


def row_to_neighbor_post(row: Row) -> NeighborPost:
    return NeighborPost(
        id=row.id,
        content=row.content,
        publisher_id=row.publisher_id,
        created_at=row.created_at,
        modified_at=row.modified_at,
    )


class NeighborPostRepositoryAdapter(NeighborPostRepository):
    """Stores community posts in ``neighbor_posts``."""

    def __init__(self, conn: Connection) -> None:
        self._conn = conn

    def get_by_id(self, post_id: int) -> Optional[NeighborPost]:
        row = self._conn.execute(
            select(neighbor_posts).where(neighbor_posts.c.id == post_id)
        ).first()
        return row_to_neighbor_post(row) if row is not None else None

    def get_summary(self, post_id: int, viewer_id: int) -> Optional[NeighborPostSummary]:
        rows = self._summaries(
            self._summary_select(viewer_id).where(neighbor_posts.c.id == post_id)
        )
        return rows[0] if rows else None

    def add(self, post: NeighborPost) -> NeighborPost:
        result = self._conn.execute(
            insert(neighbor_posts).values(
                content=post.content,
                publisher_id=post.publisher_id,
                created_at=post.created_at,
                modified_at=post.modified_at,
            )
        )
        post.id = result.inserted_primary_key[0]
        return post

    def update(self, post: NeighborPost) -> None:
        self._conn.execute(
            update(neighbor_posts)
            .where(neighbor_posts.c.id == post.id)
            .values(content=post.content, modified_at=post.modified_at)
        )

    def delete(self, post_id: int) -> None:
        self._conn.execute(
            delete(neighbor_likes).where(neighbor_likes.c.post_id == post_id)
        )
        self._conn.execute(delete(neighbor_posts).where(neighbor_posts.c.id == post_id))

    def find_page(
        self, pattern: Optional[str], limit: int, offset: int, viewer_id: int
    ) -> list[NeighborPostSummary]:
        query = self._summary_select(viewer_id)
        if pattern is not None:
            query = query.where(
                func.lower(neighbor_posts.c.content).like(pattern, escape=LIKE_ESCAPE_CHAR)
            )
        query = (
            query.order_by(neighbor_posts.c.created_at.desc(), neighbor_posts.c.id.desc())
            .limit(limit)
            .offset(offset)
        )
        return self._summaries(query)

    def find_by_publisher(
        self, publisher_id: int, viewer_id: int
    ) -> list[NeighborPostSummary]:
        query = (
            self._summary_select(viewer_id)
            .where(neighbor_posts.c.publisher_id == publisher_id)
            .order_by(neighbor_posts.c.created_at.desc(), neighbor_posts.c.id.desc())
        )
        return self._summaries(query)

    def find_liked_by(
        self, liker_id: int, limit: int, offset: int
    ) -> list[NeighborPostSummary]:
        liked = neighbor_likes.alias("liked")
        query = (
            self._summary_select(
                liker_id,
                join=(
                    liked,
                    and_(liked.c.post_id == neighbor_posts.c.id, liked.c.user_id == liker_id),
                ),
            )
            .order_by(liked.c.created_at.desc(), liked.c.id.desc())
            .limit(limit)
            .offset(offset)
        )
        return self._summaries(query)

    @staticmethod
    def _summary_select(viewer_id: int, join: Optional[tuple] = None) -> Select:
        like_count = (
            select(func.count())
            .select_from(neighbor_likes)
            .where(neighbor_likes.c.post_id == neighbor_posts.c.id)
            .correlate(neighbor_posts)
            .scalar_subquery()
        )
        viewer_likes = (
            select(func.count())
            .select_from(neighbor_likes)
            .where(
                neighbor_likes.c.post_id == neighbor_posts.c.id,
                neighbor_likes.c.user_id == viewer_id,
            )
            .correlate(neighbor_posts)
            .scalar_subquery()
        )
        source = neighbor_posts.join(users, users.c.id == neighbor_posts.c.publisher_id)
        if join is not None:
            source = source.join(*join)
        return select(
            neighbor_posts,
            users.c.username.label("publisher_username"),
            like_count.label("like_count"),
            viewer_likes.label("viewer_likes"),
        ).select_from(source)

    def _summaries(self, query: Select) -> list[NeighborPostSummary]:
        return [
            NeighborPostSummary(
                post=row_to_neighbor_post(row),
                publisher_username=row.publisher_username,
                like_count=int(row.like_count),
                is_liked=bool(row.viewer_likes),
            )
            for row in self._conn.execute(query).fetchall()
        ]
