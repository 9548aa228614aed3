"""
Use cases: Neighbor (community) feed.

    CreateNeighborPostUseCase
    GetNeighborPostUseCase
    ListNeighborPostsUseCase          : newest first, optional keyword
    GetPublisherNeighborPostsUseCase
    UpdateNeighborPostUseCase         : publisher only
    DeleteNeighborPostUseCase         : publisher only, removes likes too
    ToggleNeighborPostLikeUseCase     : publishers cannot like their own post
    GetLikedNeighborPostsUseCase      : newest like first, paged

Failure cases: UserNotFoundError, NeighborPostNotFoundError, ForbiddenError,
DomainValidationError.
"""

import logging

from app.application.market.dtos import (
    CreateNeighborPostCommand,
    LikedNeighborPostsQuery,
    LikeToggleResult,
    ListNeighborPostsQuery,
    NeighborPostActionCommand,
    NeighborPostResult,
    UpdateNeighborPostCommand,
    UserPostsQuery,
)
from app.application.market.lookups import require_neighbor_post, require_user
from app.application.market.mappers import neighbor_summary_to_result
from app.domain.market.discovery import containment_pattern, validate_paging
from app.domain.market.entities import NeighborPost, utcnow, validate_content
from app.domain.market.errors import (
    DomainValidationError,
    ForbiddenError,
    NeighborPostNotFoundError,
)
from app.domain.market.like_toggle import LikeToggle
from app.domain.market.ports import UnitOfWork, UnitOfWorkFactory

logger = logging.getLogger(__name__)

DEFAULT_MAX_PAGE_SIZE = 100


def _load_result(uow: UnitOfWork, post_id: int, viewer_id: int) -> NeighborPostResult:
    summary = uow.neighbor_posts.get_summary(post_id, viewer_id)
    if summary is None:
        raise NeighborPostNotFoundError(post_id)
    return neighbor_summary_to_result(summary)


def _check_publisher(post: NeighborPost, user_id: int) -> None:
    if not post.is_owned_by(user_id):
        raise ForbiddenError("Only the publisher of this post may do that")


def _window(page: int, size: int, max_page_size: int) -> tuple[int, int]:
    """Translate page/size into a validated (limit, offset) pair."""
    if size > max_page_size:
        raise DomainValidationError(f"Page size must not exceed {max_page_size}: {size}")
    if page < 0:
        raise DomainValidationError(f"Page must not be negative: {page}")
    validate_paging(size, page * size)
    return size, page * size


class CreateNeighborPostUseCase:
    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, command: CreateNeighborPostCommand) -> NeighborPostResult:
        with self._uow_factory() as uow:
            publisher = require_user(uow, command.user_id)
            post = uow.neighbor_posts.add(
                NeighborPost(content=command.content, publisher_id=publisher.id)
            )
            result = _load_result(uow, post.id, publisher.id)

        logger.info("Neighbor post created: post=%d, publisher=%d", post.id, publisher.id)
        return result


class GetNeighborPostUseCase:
    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, command: NeighborPostActionCommand) -> NeighborPostResult:
        with self._uow_factory() as uow:
            viewer = require_user(uow, command.user_id)
            return _load_result(uow, command.post_id, viewer.id)


class ListNeighborPostsUseCase:
    def __init__(
        self, uow_factory: UnitOfWorkFactory, max_page_size: int = DEFAULT_MAX_PAGE_SIZE
    ) -> None:
        self._uow_factory = uow_factory
        self._max_page_size = max_page_size

    def execute(self, query: ListNeighborPostsQuery) -> list[NeighborPostResult]:
        limit, offset = _window(query.page, query.size, self._max_page_size)
        with self._uow_factory() as uow:
            viewer = require_user(uow, query.user_id)
            summaries = uow.neighbor_posts.find_page(
                containment_pattern(query.keyword), limit, offset, viewer.id
            )
        return [neighbor_summary_to_result(s) for s in summaries]


class GetPublisherNeighborPostsUseCase:
    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, query: UserPostsQuery) -> list[NeighborPostResult]:
        with self._uow_factory() as uow:
            require_user(uow, query.viewer_id)
            publisher = require_user(uow, query.user_id)
            summaries = uow.neighbor_posts.find_by_publisher(publisher.id, query.viewer_id)
        return [neighbor_summary_to_result(s) for s in summaries]


class UpdateNeighborPostUseCase:
    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, command: UpdateNeighborPostCommand) -> NeighborPostResult:
        validate_content(command.content)
        with self._uow_factory() as uow:
            user = require_user(uow, command.user_id)
            post = require_neighbor_post(uow, command.post_id)
            _check_publisher(post, user.id)

            post.content = command.content
            post.modified_at = utcnow()
            uow.neighbor_posts.update(post)
            result = _load_result(uow, post.id, user.id)

        logger.info("Neighbor post updated: post=%d", post.id)
        return result


class DeleteNeighborPostUseCase:
    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, command: NeighborPostActionCommand) -> None:
        with self._uow_factory() as uow:
            user = require_user(uow, command.user_id)
            post = require_neighbor_post(uow, command.post_id)
            _check_publisher(post, user.id)
            uow.neighbor_posts.delete(post.id)

        logger.info("Neighbor post deleted: post=%d, publisher=%d", command.post_id, user.id)


class ToggleNeighborPostLikeUseCase:
    def __init__(
        self, uow_factory: UnitOfWorkFactory, toggle: LikeToggle | None = None
    ) -> None:
        self._uow_factory = uow_factory
        self._toggle = toggle or LikeToggle()

    def execute(self, command: NeighborPostActionCommand) -> LikeToggleResult:
        with self._uow_factory() as uow:
            user = require_user(uow, command.user_id)
            post = require_neighbor_post(uow, command.post_id)
            liked = self._toggle.toggle(
                uow.neighbor_likes,
                liker_id=user.id,
                owner_id=post.publisher_id,
                post_id=post.id,
            )
            like_count = uow.neighbor_likes.count_for_post(post.id)

        logger.info(
            "Neighbor post like toggled: post=%d, user=%d, liked=%s",
            post.id,
            user.id,
            liked,
        )
        return LikeToggleResult(post_id=post.id, liked=liked, like_count=like_count)


class GetLikedNeighborPostsUseCase:
    def __init__(
        self, uow_factory: UnitOfWorkFactory, max_page_size: int = DEFAULT_MAX_PAGE_SIZE
    ) -> None:
        self._uow_factory = uow_factory
        self._max_page_size = max_page_size

    def execute(self, query: LikedNeighborPostsQuery) -> list[NeighborPostResult]:
        limit, offset = _window(query.page, query.size, self._max_page_size)
        with self._uow_factory() as uow:
            liker = require_user(uow, query.user_id)
            summaries = uow.neighbor_posts.find_liked_by(liker.id, limit, offset)
        return [neighbor_summary_to_result(s) for s in summaries]
