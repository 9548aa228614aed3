"""
Domain service: Trade lifecycle state machine.

Pure business logic for moving a trade post through its statuses:

    TRADING ──reserve──▶ RESERVATION ──confirm──▶ COMPLETED
       ▲                      │
       └────────cancel────────┘

COMPLETED is terminal. Every transition is reserved to the seller.
No framework imports. No IO. Mutates the given TradePost in place.
"""

from app.domain.market.entities import TradePost, TradeStatus
from app.domain.market.errors import DomainValidationError, ForbiddenError


class TradeLifecycle:
    """Applies status transitions to trade posts after checking preconditions."""

    def check_owner(self, post: TradePost, user_id: int) -> None:
        """Raise ForbiddenError unless ``user_id`` is the post's seller."""
        if not post.is_owned_by(user_id):
            raise ForbiddenError("Only the seller of this post may do that")

    def reserve(self, post: TradePost, seller_id: int, buyer_id: int) -> bool:
        """Assign ``buyer_id`` and move the post to RESERVATION.

        Re-reserving for the same buyer is a no-op. A post reserved for
        someone else must be cancelled first.

        Returns:
            True when the post changed, False for the idempotent case.

        Raises:
            ForbiddenError: Caller is not the seller.
            DomainValidationError: Buyer is the seller, post is completed,
                or post is reserved for another buyer.
        """
        self.check_owner(post, seller_id)
        if buyer_id == post.seller_id:
            raise DomainValidationError("A seller cannot reserve their own post")
        if post.status is TradeStatus.COMPLETED:
            raise DomainValidationError("The trade is already completed")
        if post.status is TradeStatus.RESERVATION:
            if post.buyer_id == buyer_id:
                return False
            raise DomainValidationError("The post is already reserved by another buyer")

        post.buyer_id = buyer_id
        post.status = TradeStatus.RESERVATION
        post.touch()
        return True

    def confirm(self, post: TradePost, seller_id: int) -> None:
        """Complete the trade with the reserved buyer."""
        self.check_owner(post, seller_id)
        if post.status is not TradeStatus.RESERVATION or post.buyer_id is None:
            raise DomainValidationError("There is no reserved buyer")
        post.status = TradeStatus.COMPLETED
        post.touch()

    def cancel(self, post: TradePost, seller_id: int) -> None:
        """Drop the reservation and put the post back on sale."""
        self.check_owner(post, seller_id)
        if post.status is not TradeStatus.RESERVATION:
            raise DomainValidationError("The post is not currently reserved")
        post.buyer_id = None
        post.status = TradeStatus.TRADING
        post.touch()

    def check_deletable(self, post: TradePost, seller_id: int) -> None:
        """Only the seller may delete, and never while a reservation is open."""
        self.check_owner(post, seller_id)
        if post.status is TradeStatus.RESERVATION:
            raise DomainValidationError("Cancel the reservation before deleting the post")

    def check_editable(self, post: TradePost, seller_id: int) -> None:
        self.check_owner(post, seller_id)
