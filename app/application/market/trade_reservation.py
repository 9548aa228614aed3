"""
Use cases: Reservation workflow of a trade post.

    ReserveTradePostUseCase: seller assigns a buyer (TRADING → RESERVATION)
    ConfirmTradeUseCase    : seller completes the trade (RESERVATION → COMPLETED)
    CancelTradeUseCase     : seller drops the buyer (RESERVATION → TRADING)
    GetReservationUseCase  : seller reads the current reservation

Output: ReservationResult (Cancel returns it too, with no buyer).
Side effects: Updates status and buyer of one post.
Failure cases: UserNotFoundError, TradePostNotFoundError, ForbiddenError,
DomainValidationError.
"""

import logging

from app.application.market.dtos import (
    ReservationResult,
    ReserveTradePostCommand,
    TradePostActionCommand,
)
from app.application.market.lookups import require_trade_post_parties, require_user
from app.application.market.mappers import to_user_summary
from app.domain.market.entities import TradePost, User
from app.domain.market.ports import UnitOfWorkFactory
from app.domain.market.trade_lifecycle import TradeLifecycle

logger = logging.getLogger(__name__)


def _reservation(post: TradePost, seller: User, buyer: User | None) -> ReservationResult:
    return ReservationResult(
        post_id=post.id,
        status=post.status.value,
        seller=to_user_summary(seller),
        buyer=to_user_summary(buyer),
    )


class _ReservationUseCase:
    def __init__(
        self, uow_factory: UnitOfWorkFactory, lifecycle: TradeLifecycle | None = None
    ) -> None:
        self._uow_factory = uow_factory
        self._lifecycle = lifecycle or TradeLifecycle()


class ReserveTradePostUseCase(_ReservationUseCase):
    """Reserves a post for a buyer.

    A post already reserved for the same buyer is returned unchanged;
    one reserved for another buyer, or completed, is rejected.
    """

    def execute(self, command: ReserveTradePostCommand) -> ReservationResult:
        with self._uow_factory() as uow:
            seller = require_user(uow, command.seller_id)
            buyer = require_user(uow, command.buyer_id)
            parties = require_trade_post_parties(uow, command.post_id)
            post = parties.post

            changed = self._lifecycle.reserve(post, seller.id, buyer.id)
            if changed:
                uow.trade_posts.update(post)

        logger.info(
            "Trade post reserved: post=%d, buyer=%d, changed=%s",
            post.id,
            buyer.id,
            changed,
        )
        return _reservation(post, parties.seller, buyer)


class ConfirmTradeUseCase(_ReservationUseCase):
    """Completes the trade with the reserved buyer."""

    def execute(self, command: TradePostActionCommand) -> ReservationResult:
        with self._uow_factory() as uow:
            seller = require_user(uow, command.user_id)
            parties = require_trade_post_parties(uow, command.post_id)
            self._lifecycle.confirm(parties.post, seller.id)
            uow.trade_posts.update(parties.post)

        logger.info(
            "Trade completed: post=%d, buyer=%d", parties.post.id, parties.post.buyer_id
        )
        return _reservation(parties.post, parties.seller, parties.buyer)


class CancelTradeUseCase(_ReservationUseCase):
    """Cancels the reservation and puts the post back on sale."""

    def execute(self, command: TradePostActionCommand) -> ReservationResult:
        with self._uow_factory() as uow:
            seller = require_user(uow, command.user_id)
            parties = require_trade_post_parties(uow, command.post_id)
            self._lifecycle.cancel(parties.post, seller.id)
            uow.trade_posts.update(parties.post)

        logger.info("Reservation cancelled: post=%d", parties.post.id)
        return _reservation(parties.post, parties.seller, None)


class GetReservationUseCase(_ReservationUseCase):
    """Shows the seller who, if anyone, holds the reservation."""

    def execute(self, command: TradePostActionCommand) -> ReservationResult:
        with self._uow_factory() as uow:
            seller = require_user(uow, command.user_id)
            parties = require_trade_post_parties(uow, command.post_id)
            self._lifecycle.check_owner(parties.post, seller.id)

        return _reservation(parties.post, parties.seller, parties.buyer)
