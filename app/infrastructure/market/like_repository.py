"""
Adapter: Like repositories.

Implements LikeRepository port for both ``like_posts`` (trade posts) and
``neighbor_likes`` (neighbor posts). The two tables share one shape:
(id, user_id, post_id, created_at) with UNIQUE(user_id, post_id).
"""

import logging
from typing import Optional

from sqlalchemy import Table, delete, func, insert, select
from sqlalchemy.engine import Connection
from sqlalchemy.exc import IntegrityError

from app.domain.market.entities import LikePost, NeighborLike
from app.domain.market.errors import DuplicateLikeError
from app.domain.market.ports import LikeRepository
from app.infrastructure.market.schema import like_posts, neighbor_likes

logger = logging.getLogger(__name__)


class _SqlLikeRepository(LikeRepository):
    """Shared SQL for both like tables."""

    table: Table
    entity: type

    def __init__(self, conn: Connection) -> None:
        self._conn = conn

    def find(self, liker_id: int, post_id: int) -> Optional[object]:
        row = self._conn.execute(
            select(self.table).where(
                self.table.c.user_id == liker_id,
                self.table.c.post_id == post_id,
            )
        ).first()
        if row is None:
            return None
        return self.entity(
            id=row.id,
            liker_id=row.user_id,
            post_id=row.post_id,
            created_at=row.created_at,
        )

    def new(self, liker_id: int, post_id: int):
        return self.entity(liker_id=liker_id, post_id=post_id)

    def add(self, like):
        """Insert inside a SAVEPOINT so a duplicate leaves the transaction usable.

        Only a violation caused by an existing (liker, post) row is reported
        as DuplicateLikeError. Any other integrity failure, such as the post
        having been deleted meanwhile, propagates unchanged.
        """
        try:
            with self._conn.begin_nested():
                result = self._conn.execute(
                    insert(self.table).values(
                        user_id=like.liker_id,
                        post_id=like.post_id,
                        created_at=like.created_at,
                    )
                )
        except IntegrityError as exc:
            if self.find(like.liker_id, like.post_id) is None:
                logger.warning(
                    "Like insert failed on %s: liker_id=%s post_id=%s",
                    self.table.name,
                    like.liker_id,
                    like.post_id,
                )
                raise
            raise DuplicateLikeError(like.liker_id, like.post_id) from exc
        like.id = result.inserted_primary_key[0]
        return like

    def delete(self, like) -> None:
        self._conn.execute(
            delete(self.table).where(
                self.table.c.user_id == like.liker_id,
                self.table.c.post_id == like.post_id,
            )
        )

    def count_for_post(self, post_id: int) -> int:
        return int(
            self._conn.execute(
                select(func.count())
                .select_from(self.table)
                .where(self.table.c.post_id == post_id)
            ).scalar_one()
        )


class TradeLikeRepositoryAdapter(_SqlLikeRepository):
    """Likes on trade posts."""

    table = like_posts
    entity = LikePost


class NeighborLikeRepositoryAdapter(_SqlLikeRepository):
    """Likes on neighbor posts."""

    table = neighbor_likes
    entity = NeighborLike
