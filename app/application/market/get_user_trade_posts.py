"""
Use cases: A user's trade activity.

    GetBuyTradePostsUseCase  : completed purchases, oldest first
    GetSellTradePostsUseCase : every post of a seller, oldest first
    GetLikedTradePostsUseCase: posts the user liked, in the order liked

Input: UserPostsQuery (viewer, user)
Output: list[TradePostResult]
Failure cases: UserNotFoundError for an unknown viewer or user.
"""

from app.application.market.dtos import TradePostResult, UserPostsQuery
from app.application.market.lookups import require_user
from app.application.market.mappers import summary_to_result
from app.domain.market.ports import UnitOfWorkFactory


class GetBuyTradePostsUseCase:
    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, query: UserPostsQuery) -> list[TradePostResult]:
        with self._uow_factory() as uow:
            require_user(uow, query.viewer_id)
            buyer = require_user(uow, query.user_id)
            summaries = uow.trade_posts.find_by_buyer(buyer.id, query.viewer_id)
        return [summary_to_result(s) for s in summaries]


class GetSellTradePostsUseCase:
    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, query: UserPostsQuery) -> list[TradePostResult]:
        with self._uow_factory() as uow:
            require_user(uow, query.viewer_id)
            seller = require_user(uow, query.user_id)
            summaries = uow.trade_posts.find_by_seller(seller.id, query.viewer_id)
        return [summary_to_result(s) for s in summaries]


class GetLikedTradePostsUseCase:
    """Lists the user's own likes; every entry is liked by construction."""

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, query: UserPostsQuery) -> list[TradePostResult]:
        with self._uow_factory() as uow:
            liker = require_user(uow, query.user_id)
            summaries = uow.trade_posts.find_liked_by(liker.id)
        return [summary_to_result(s) for s in summaries]
