"""
Use cases: Leaderboards.

    GetTopLikedPostsUseCase: most-liked trade posts (ties: lowest id first)
    GetWarmestUsersUseCase : users with the highest temperature (ties: lowest id first)

Failure cases:
    UserNotFoundError: the viewer of the top-liked list does not exist

Side effects: None (read-only queries).
"""

from app.application.market.dtos import TradePostResult, UserSummaryResult
from app.application.market.lookups import require_user
from app.application.market.mappers import summary_to_result, to_user_summary
from app.domain.market.ports import UnitOfWorkFactory

DEFAULT_RANKING_SIZE = 3


class GetTopLikedPostsUseCase:
    def __init__(
        self, uow_factory: UnitOfWorkFactory, ranking_size: int = DEFAULT_RANKING_SIZE
    ) -> None:
        self._uow_factory = uow_factory
        self._ranking_size = ranking_size

    def execute(self, viewer_id: int) -> list[TradePostResult]:
        with self._uow_factory() as uow:
            require_user(uow, viewer_id)
            summaries = uow.trade_posts.find_top_liked(self._ranking_size, viewer_id)
        return [summary_to_result(s) for s in summaries]


class GetWarmestUsersUseCase:
    def __init__(
        self, uow_factory: UnitOfWorkFactory, ranking_size: int = DEFAULT_RANKING_SIZE
    ) -> None:
        self._uow_factory = uow_factory
        self._ranking_size = ranking_size

    def execute(self) -> list[UserSummaryResult]:
        with self._uow_factory() as uow:
            users = uow.users.find_top_by_temperature(self._ranking_size)
        return [to_user_summary(u) for u in users]
