"""
Lookups that turn a missing row into the matching NotFound error.
"""

from app.domain.market.entities import NeighborPost, TradePost, TradePostParties, User
from app.domain.market.errors import (
    NeighborPostNotFoundError,
    TradePostNotFoundError,
    UserNotFoundError,
)
from app.domain.market.ports import UnitOfWork


def require_user(uow: UnitOfWork, user_id: int) -> User:
    user = uow.users.get_by_id(user_id)
    if user is None:
        raise UserNotFoundError(user_id)
    return user


def require_trade_post(uow: UnitOfWork, post_id: int) -> TradePost:
    post = uow.trade_posts.get_by_id(post_id)
    if post is None:
        raise TradePostNotFoundError(post_id)
    return post


def require_trade_post_parties(uow: UnitOfWork, post_id: int) -> TradePostParties:
    parties = uow.trade_posts.get_with_seller_and_buyer(post_id)
    if parties is None:
        raise TradePostNotFoundError(post_id)
    return parties


def require_neighbor_post(uow: UnitOfWork, post_id: int) -> NeighborPost:
    post = uow.neighbor_posts.get_by_id(post_id)
    if post is None:
        raise NeighborPostNotFoundError(post_id)
    return post
