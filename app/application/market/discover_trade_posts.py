"""
Use case: Browse trade posts near the viewer.

Input: DiscoverTradePostsQuery (viewer, keyword, page, size, trading_only)
Output: TradePostPageResult
Side effects: None (read-only query).
Failure cases: UserNotFoundError, DomainValidationError (page size not
positive or above the maximum, negative page).
"""

import logging

from app.application.market.dtos import DiscoverTradePostsQuery, TradePostPageResult
from app.application.market.lookups import require_user
from app.application.market.mappers import summary_to_result
from app.domain.market.discovery import DiscoveryCriteria, DiscoveryPage
from app.domain.market.errors import DomainValidationError
from app.domain.market.ports import UnitOfWorkFactory

logger = logging.getLogger(__name__)

DEFAULT_MAX_PAGE_SIZE = 100


class DiscoverTradePostsUseCase:
    """Runs the geospatial + keyword discovery query for one page.

    The area is the viewer's stored coordinate and search radius. The
    page and its total are read in the same unit of work.
    """

    def __init__(
        self, uow_factory: UnitOfWorkFactory, max_page_size: int = DEFAULT_MAX_PAGE_SIZE
    ) -> None:
        self._uow_factory = uow_factory
        self._max_page_size = max_page_size

    def execute(self, query: DiscoverTradePostsQuery) -> TradePostPageResult:
        if query.size > self._max_page_size:
            raise DomainValidationError(
                f"Page size must not exceed {self._max_page_size}: {query.size}"
            )
        if query.page < 0:
            raise DomainValidationError(f"Page must not be negative: {query.page}")

        with self._uow_factory() as uow:
            viewer = require_user(uow, query.user_id)
            criteria = DiscoveryCriteria(
                origin=viewer.coordinate,
                radius_km=viewer.search_radius_km,
                keyword=query.keyword,
                limit=query.size,
                offset=query.page * query.size,
                trading_only=query.trading_only,
            )
            page = DiscoveryPage(
                posts=uow.trade_posts.find_nearby(criteria, viewer.id),
                total=uow.trade_posts.count_nearby(criteria),
                limit=criteria.limit,
                offset=criteria.offset,
            )

        logger.info(
            "Discovery: viewer=%d, radius_km=%.2f, page=%d, returned=%d, total=%d",
            viewer.id,
            criteria.radius_km,
            page.page,
            len(page.posts),
            page.total,
        )
        return TradePostPageResult(
            posts=[summary_to_result(s) for s in page.posts],
            page=page.page,
            size=page.limit,
            total=page.total,
            total_pages=page.total_pages,
        )
