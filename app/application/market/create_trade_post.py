"""
Use case: List an item for sale.

Input: CreateTradePostCommand (seller, title, description, price, images)
Output: TradePostResult
Side effects: Inserts one trade post and its images.
Failure cases: UserNotFoundError, DomainValidationError (blank title,
negative price, bad coordinate).
"""

import logging

from app.application.market.dtos import CreateTradePostCommand, TradePostResult
from app.application.market.lookups import require_user
from app.application.market.mappers import to_trade_post_result
from app.domain.market.entities import Coordinate, TradePost
from app.domain.market.ports import UnitOfWorkFactory

logger = logging.getLogger(__name__)


class CreateTradePostUseCase:
    """Creates a TRADING post located at the seller's coordinate by default."""

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, command: CreateTradePostCommand) -> TradePostResult:
        """Run the create trade post use case.

        Args:
            command: Seller id and listing fields.

        Returns:
            The stored post, with no likes and zero views.
        """
        with self._uow_factory() as uow:
            seller = require_user(uow, command.user_id)
            coordinate = seller.coordinate
            if command.latitude is not None and command.longitude is not None:
                coordinate = Coordinate(command.latitude, command.longitude)

            post = uow.trade_posts.add(
                TradePost(
                    title=command.title,
                    description=command.description,
                    price=command.price,
                    seller_id=seller.id,
                    coordinate=coordinate,
                    images=list(command.image_urls),
                )
            )

        logger.info("Trade post created: post=%d, seller=%d", post.id, seller.id)
        return to_trade_post_result(post, seller.username, like_count=0, is_liked=False)
