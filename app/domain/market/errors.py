"""
Domain-specific errors for the market bounded context.

All errors raised from the domain layer must be defined here.
These are mapped to HTTP responses at the interface layer.
No framework imports allowed.
"""


class MarketDomainError(Exception):
    """Base error for all market domain errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)


class NotFoundError(MarketDomainError):
    """Raised when a referenced user or post does not exist."""


class UserNotFoundError(NotFoundError):
    """Raised when a user id does not resolve to a user."""

    def __init__(self, user_id: int) -> None:
        super().__init__(f"User not found: {user_id}")
        self.user_id = user_id


class TradePostNotFoundError(NotFoundError):
    """Raised when a trade post id does not resolve to a post."""

    def __init__(self, post_id: int) -> None:
        super().__init__(f"Trade post not found: {post_id}")
        self.post_id = post_id


class NeighborPostNotFoundError(NotFoundError):
    """Raised when a neighbor post id does not resolve to a post."""

    def __init__(self, post_id: int) -> None:
        super().__init__(f"Neighbor post not found: {post_id}")
        self.post_id = post_id


class ForbiddenError(MarketDomainError):
    """Raised when the caller does not own the resource it tries to change."""


class DomainValidationError(MarketDomainError):
    """Raised for malformed or contradictory requests.

    Examples: liking your own post, confirming a post with no reserved
    buyer, cancelling a post that is not reserved.
    """


class ConflictError(MarketDomainError):
    """Raised when a uniqueness rule is violated (username, email)."""


class DuplicateLikeError(ConflictError):
    """Raised by like repositories when the (liker, post) pair already exists."""

    def __init__(self, liker_id: int, post_id: int) -> None:
        super().__init__(f"Like already exists: liker={liker_id}, post={post_id}")
        self.liker_id = liker_id
        self.post_id = post_id
