"""
Port interfaces (ABCs) for the market bounded context.

Ports define the contracts that the domain requires from the outside world.
Infrastructure adapters implement these interfaces.
The domain layer never depends on concrete implementations.
"""

from abc import ABC, abstractmethod
from types import TracebackType
from typing import Callable, Generic, Optional, TypeVar, Union

from app.domain.market.discovery import DiscoveryCriteria
from app.domain.market.entities import (
    LikePost,
    NeighborLike,
    NeighborPost,
    NeighborPostSummary,
    TradePost,
    TradePostParties,
    TradePostSummary,
    User,
)

LikeT = TypeVar("LikeT", bound=Union[LikePost, NeighborLike])


class UserRepository(ABC):
    """Port for persisting and retrieving users."""

    @abstractmethod
    def get_by_id(self, user_id: int) -> Optional[User]:
        """Return a user by id, or None if not found."""
        raise NotImplementedError

    @abstractmethod
    def get_by_username(self, username: str) -> Optional[User]:
        raise NotImplementedError

    @abstractmethod
    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    @abstractmethod
    def add(self, user: User) -> User:
        """Persist a new user and return it with its id assigned.

        Raises:
            ConflictError: If the username or email is already taken.
        """
        raise NotImplementedError

    @abstractmethod
    def update(self, user: User) -> None:
        """Persist changes to an existing user's mutable fields.

        Raises:
            ConflictError: If the new username collides with another user.
        """
        raise NotImplementedError

    @abstractmethod
    def find_top_by_temperature(self, limit: int) -> list[User]:
        """Return the warmest users, temperature descending then id ascending."""
        raise NotImplementedError


class TradePostRepository(ABC):
    """Port for persisting and querying trade posts.

    Every ``find_*`` method takes a ``viewer_id`` so the returned
    summaries carry whether that viewer liked each post.
    """

    @abstractmethod
    def get_by_id(self, post_id: int) -> Optional[TradePost]:
        """Return a trade post (with its images), or None if not found."""
        raise NotImplementedError

    @abstractmethod
    def get_with_seller_and_buyer(self, post_id: int) -> Optional[TradePostParties]:
        """Return the post with seller and buyer resolved in one read."""
        raise NotImplementedError

    @abstractmethod
    def add(self, post: TradePost) -> TradePost:
        """Persist a new post and its images; return it with its id assigned."""
        raise NotImplementedError

    @abstractmethod
    def update(self, post: TradePost) -> None:
        """Persist scalar fields and replace the image list wholesale."""
        raise NotImplementedError

    @abstractmethod
    def delete(self, post_id: int) -> None:
        """Delete the post together with its images and likes."""
        raise NotImplementedError

    @abstractmethod
    def increment_view_count(self, post_id: int) -> None:
        raise NotImplementedError

    @abstractmethod
    def find_nearby(
        self, criteria: DiscoveryCriteria, viewer_id: int
    ) -> list[TradePostSummary]:
        """Return one page of posts matching the discovery criteria.

        Ordered by creation time descending, id descending.
        """
        raise NotImplementedError

    @abstractmethod
    def count_nearby(self, criteria: DiscoveryCriteria) -> int:
        """Return the unpaginated number of posts matching the criteria."""
        raise NotImplementedError

    @abstractmethod
    def find_by_seller(self, seller_id: int, viewer_id: int) -> list[TradePostSummary]:
        """Return all posts sold by ``seller_id``, oldest first."""
        raise NotImplementedError

    @abstractmethod
    def find_by_buyer(self, buyer_id: int, viewer_id: int) -> list[TradePostSummary]:
        """Return completed posts bought by ``buyer_id``, oldest first."""
        raise NotImplementedError

    @abstractmethod
    def find_liked_by(self, liker_id: int) -> list[TradePostSummary]:
        """Return posts liked by ``liker_id`` in the order they were liked."""
        raise NotImplementedError

    @abstractmethod
    def find_top_liked(self, limit: int, viewer_id: int) -> list[TradePostSummary]:
        """Return the most-liked posts, like count descending then id ascending."""
        raise NotImplementedError


class LikeRepository(ABC, Generic[LikeT]):
    """Port for a unique (liker, post) interest relation."""

    @abstractmethod
    def find(self, liker_id: int, post_id: int) -> Optional[LikeT]:
        raise NotImplementedError

    @abstractmethod
    def new(self, liker_id: int, post_id: int) -> LikeT:
        """Build (without persisting) a like entity for this relation."""
        raise NotImplementedError

    @abstractmethod
    def add(self, like: LikeT) -> LikeT:
        """Persist a like.

        Raises:
            DuplicateLikeError: If the (liker, post) pair already exists.
        """
        raise NotImplementedError

    @abstractmethod
    def delete(self, like: LikeT) -> None:
        raise NotImplementedError

    @abstractmethod
    def count_for_post(self, post_id: int) -> int:
        raise NotImplementedError


class NeighborPostRepository(ABC):
    """Port for persisting and querying neighbor (community) posts."""

    @abstractmethod
    def get_by_id(self, post_id: int) -> Optional[NeighborPost]:
        raise NotImplementedError

    @abstractmethod
    def get_summary(self, post_id: int, viewer_id: int) -> Optional[NeighborPostSummary]:
        raise NotImplementedError

    @abstractmethod
    def add(self, post: NeighborPost) -> NeighborPost:
        raise NotImplementedError

    @abstractmethod
    def update(self, post: NeighborPost) -> None:
        raise NotImplementedError

    @abstractmethod
    def delete(self, post_id: int) -> None:
        """Delete the post together with its likes."""
        raise NotImplementedError

    @abstractmethod
    def find_page(
        self, pattern: Optional[str], limit: int, offset: int, viewer_id: int
    ) -> list[NeighborPostSummary]:
        """Return newest-first posts, optionally filtered by a LIKE pattern."""
        raise NotImplementedError

    @abstractmethod
    def find_by_publisher(
        self, publisher_id: int, viewer_id: int
    ) -> list[NeighborPostSummary]:
        raise NotImplementedError

    @abstractmethod
    def find_liked_by(
        self, liker_id: int, limit: int, offset: int
    ) -> list[NeighborPostSummary]:
        raise NotImplementedError


class UnitOfWork(ABC):
    """Port for one all-or-nothing transaction over the market repositories.

    Used as a context manager: commits on normal exit, rolls back when
    the block raises.
    """

    users: UserRepository
    trade_posts: TradePostRepository
    trade_likes: LikeRepository[LikePost]
    neighbor_posts: NeighborPostRepository
    neighbor_likes: LikeRepository[NeighborLike]

    def __enter__(self) -> "UnitOfWork":
        return self

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        if exc_type is None:
            self.commit()
        else:
            self.rollback()

    @abstractmethod
    def commit(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def rollback(self) -> None:
        raise NotImplementedError


class PasswordHasher(ABC):
    """Port for one-way password hashing."""

    @abstractmethod
    def hash(self, raw_password: str) -> str:
        raise NotImplementedError

    @abstractmethod
    def verify(self, raw_password: str, password_hash: str) -> bool:
        raise NotImplementedError


UnitOfWorkFactory = Callable[[], UnitOfWork]
