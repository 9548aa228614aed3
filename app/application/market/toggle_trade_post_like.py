"""
Use case: Like or unlike a trade post.

Input: TradePostActionCommand (liker, post)
Output: LikeToggleResult
Side effects: Inserts or deletes one like row.
Failure cases: UserNotFoundError, TradePostNotFoundError,
DomainValidationError (liking your own post).
"""

import logging

from app.application.market.dtos import LikeToggleResult, TradePostActionCommand
from app.application.market.lookups import require_trade_post, require_user
from app.domain.market.like_toggle import LikeToggle
from app.domain.market.ports import UnitOfWorkFactory

logger = logging.getLogger(__name__)


class ToggleTradePostLikeUseCase:
    def __init__(
        self, uow_factory: UnitOfWorkFactory, toggle: LikeToggle | None = None
    ) -> None:
        self._uow_factory = uow_factory
        self._toggle = toggle or LikeToggle()

    def execute(self, command: TradePostActionCommand) -> LikeToggleResult:
        with self._uow_factory() as uow:
            user = require_user(uow, command.user_id)
            post = require_trade_post(uow, command.post_id)
            liked = self._toggle.toggle(
                uow.trade_likes,
                liker_id=user.id,
                owner_id=post.seller_id,
                post_id=post.id,
            )
            like_count = uow.trade_likes.count_for_post(post.id)

        logger.info(
            "Trade post like toggled: post=%d, user=%d, liked=%s", post.id, user.id, liked
        )
        return LikeToggleResult(post_id=post.id, liked=liked, like_count=like_count)
