"""
Domain service: Like/unlike toggle.

A single call flips the presence of a (liker, post) relation.
Works for any LikeRepository (trade post likes, neighbor post likes).
"""

import logging

from app.domain.market.errors import DomainValidationError, DuplicateLikeError
from app.domain.market.ports import LikeRepository

logger = logging.getLogger(__name__)


class LikeToggle:
    """Creates the relation when absent and removes it when present."""

    def toggle(
        self,
        likes: LikeRepository,
        liker_id: int,
        owner_id: int,
        post_id: int,
    ) -> bool:
        """Toggle ``liker_id``'s like on ``post_id``.

        Args:
            likes: Repository holding the relation, bound to the caller's
                unit of work.
            liker_id: User toggling the like.
            owner_id: Author of the post; may not like it.
            post_id: Target post.

        Returns:
            True if the post is liked after the call, False otherwise.

        Raises:
            DomainValidationError: If the liker owns the post.
        """
        if liker_id == owner_id:
            raise DomainValidationError("You cannot like your own post")

        existing = likes.find(liker_id, post_id)
        if existing is not None:
            likes.delete(existing)
            return False

        try:
            likes.add(likes.new(liker_id, post_id))
        except DuplicateLikeError:
            # A concurrent toggle inserted the same pair first.
            logger.info(
                "Concurrent like detected: liker=%d, post=%d", liker_id, post_id
            )
        return True
