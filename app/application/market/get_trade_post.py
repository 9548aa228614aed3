"""
Use case: Read one trade post.

Input: TradePostActionCommand (viewer, post)
Output: TradePostDetailResult
Side effects: Increments the post's view count on every call.
Failure cases: UserNotFoundError, TradePostNotFoundError.
"""

import logging

from app.application.market.dtos import TradePostActionCommand, TradePostDetailResult
from app.application.market.lookups import require_trade_post_parties, require_user
from app.application.market.mappers import to_trade_post_result, to_user_summary
from app.domain.market.ports import UnitOfWorkFactory

logger = logging.getLogger(__name__)


class GetTradePostUseCase:
    """Returns a post with seller and buyer, counting the read as a view."""

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, command: TradePostActionCommand) -> TradePostDetailResult:
        with self._uow_factory() as uow:
            viewer = require_user(uow, command.user_id)
            parties = require_trade_post_parties(uow, command.post_id)
            uow.trade_posts.increment_view_count(command.post_id)
            parties.post.view_count += 1

            like_count = uow.trade_likes.count_for_post(command.post_id)
            is_liked = uow.trade_likes.find(viewer.id, command.post_id) is not None

        logger.debug("Trade post viewed: post=%d, viewer=%d", command.post_id, viewer.id)
        return TradePostDetailResult(
            post=to_trade_post_result(
                parties.post, parties.seller.username, like_count, is_liked
            ),
            seller=to_user_summary(parties.seller),
            buyer=to_user_summary(parties.buyer),
        )
