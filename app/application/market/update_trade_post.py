"""
Use case: Edit a trade post.

Input: UpdateTradePostCommand (seller, post, optional fields)
Output: TradePostResult
Side effects: Updates the post; replaces its images when new ones are given.
Failure cases: UserNotFoundError, TradePostNotFoundError, ForbiddenError,
DomainValidationError.
"""

import logging

from app.application.market.dtos import TradePostResult, UpdateTradePostCommand
from app.application.market.lookups import require_trade_post_parties, require_user
from app.application.market.mappers import to_trade_post_result
from app.domain.market.entities import validate_price, validate_title
from app.domain.market.ports import UnitOfWorkFactory
from app.domain.market.trade_lifecycle import TradeLifecycle

logger = logging.getLogger(__name__)


class UpdateTradePostUseCase:
    """Applies a seller's edits; omitted fields keep their current value."""

    def __init__(
        self, uow_factory: UnitOfWorkFactory, lifecycle: TradeLifecycle | None = None
    ) -> None:
        self._uow_factory = uow_factory
        self._lifecycle = lifecycle or TradeLifecycle()

    def execute(self, command: UpdateTradePostCommand) -> TradePostResult:
        with self._uow_factory() as uow:
            user = require_user(uow, command.user_id)
            parties = require_trade_post_parties(uow, command.post_id)
            post = parties.post
            self._lifecycle.check_editable(post, user.id)

            if command.title is not None:
                validate_title(command.title)
                post.title = command.title
            if command.description is not None:
                post.description = command.description
            if command.price is not None:
                validate_price(command.price)
                post.price = command.price
            if command.image_urls is not None:
                post.images = list(command.image_urls)
            post.touch()
            uow.trade_posts.update(post)

            like_count = uow.trade_likes.count_for_post(post.id)
            is_liked = uow.trade_likes.find(user.id, post.id) is not None

        logger.info("Trade post updated: post=%d", post.id)
        return to_trade_post_result(post, parties.seller.username, like_count, is_liked)
