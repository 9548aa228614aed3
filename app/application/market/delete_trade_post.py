"""
Use case: Delete a trade post.

Input: TradePostActionCommand (seller, post)
Output: None
Side effects: Removes the post, its images and its likes.
Failure cases: UserNotFoundError, TradePostNotFoundError, ForbiddenError,
DomainValidationError (post is currently reserved).
"""

import logging

from app.application.market.dtos import TradePostActionCommand
from app.application.market.lookups import require_trade_post, require_user
from app.domain.market.ports import UnitOfWorkFactory
from app.domain.market.trade_lifecycle import TradeLifecycle

logger = logging.getLogger(__name__)


class DeleteTradePostUseCase:
    """Deletes a seller's post unless a reservation is open on it."""

    def __init__(
        self, uow_factory: UnitOfWorkFactory, lifecycle: TradeLifecycle | None = None
    ) -> None:
        self._uow_factory = uow_factory
        self._lifecycle = lifecycle or TradeLifecycle()

    def execute(self, command: TradePostActionCommand) -> None:
        with self._uow_factory() as uow:
            user = require_user(uow, command.user_id)
            post = require_trade_post(uow, command.post_id)
            self._lifecycle.check_deletable(post, user.id)
            uow.trade_posts.delete(post.id)

        logger.info("Trade post deleted: post=%d, seller=%d", command.post_id, user.id)
