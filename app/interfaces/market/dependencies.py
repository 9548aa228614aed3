"""
Dependency injection for the market bounded context.

Provides FastAPI dependency functions that wire infrastructure
adapters into use cases via constructor injection.
These are the composition root for the market context.
"""

from functools import lru_cache

from fastapi import Depends, Header
from sqlalchemy.engine import Engine

from app.application.market.create_trade_post import CreateTradePostUseCase
from app.application.market.delete_trade_post import DeleteTradePostUseCase
from app.application.market.discover_trade_posts import DiscoverTradePostsUseCase
from app.application.market.get_rankings import (
    GetTopLikedPostsUseCase,
    GetWarmestUsersUseCase,
)
from app.application.market.get_trade_post import GetTradePostUseCase
from app.application.market.get_user_trade_posts import (
    GetBuyTradePostsUseCase,
    GetLikedTradePostsUseCase,
    GetSellTradePostsUseCase,
)
from app.application.market.manage_profile import (
    EditLocationUseCase,
    EditPasswordUseCase,
    EditSearchRadiusUseCase,
    EditUsernameUseCase,
    GetProfileUseCase,
    RegisterUserUseCase,
)
from app.application.market.neighbor_posts import (
    CreateNeighborPostUseCase,
    DeleteNeighborPostUseCase,
    GetLikedNeighborPostsUseCase,
    GetNeighborPostUseCase,
    GetPublisherNeighborPostsUseCase,
    ListNeighborPostsUseCase,
    ToggleNeighborPostLikeUseCase,
    UpdateNeighborPostUseCase,
)
from app.application.market.toggle_trade_post_like import ToggleTradePostLikeUseCase
from app.application.market.trade_reservation import (
    CancelTradeUseCase,
    ConfirmTradeUseCase,
    GetReservationUseCase,
    ReserveTradePostUseCase,
)
from app.application.market.update_trade_post import UpdateTradePostUseCase
from app.core.config import settings
from app.domain.market.ports import UnitOfWorkFactory
from app.infrastructure.market.database import build_engine
from app.infrastructure.market.password_hasher import WerkzeugPasswordHasher
from app.infrastructure.market.unit_of_work import sqlalchemy_uow_factory
from app.interfaces.market.schemas import ID_MAX


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    """Build the process-wide SQLAlchemy engine from application settings."""
    return build_engine(settings.get_database_dsn(), echo=settings.sql_echo)


def get_uow_factory(engine: Engine = Depends(get_engine)) -> UnitOfWorkFactory:
    return sqlalchemy_uow_factory(engine)


def get_current_user_id(
    x_user_id: int = Header(..., alias="X-User-Id", ge=1, le=ID_MAX),
) -> int:
    """Identity of the caller, as asserted by the upstream identity provider."""
    return x_user_id


# ── users ────────────────────────────────────────────────────────


def get_register_user_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> RegisterUserUseCase:
    return RegisterUserUseCase(
        uow_factory,
        hasher=WerkzeugPasswordHasher(),
        default_temperature=settings.default_temperature,
        default_search_radius_km=settings.default_search_radius_km,
    )


def get_profile_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> GetProfileUseCase:
    return GetProfileUseCase(uow_factory)


def get_edit_username_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> EditUsernameUseCase:
    return EditUsernameUseCase(uow_factory)


def get_edit_location_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> EditLocationUseCase:
    return EditLocationUseCase(uow_factory)


def get_edit_search_radius_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> EditSearchRadiusUseCase:
    return EditSearchRadiusUseCase(
        uow_factory, max_search_radius_km=settings.max_search_radius_km
    )


def get_edit_password_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> EditPasswordUseCase:
    return EditPasswordUseCase(uow_factory, hasher=WerkzeugPasswordHasher())


def get_warmest_users_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> GetWarmestUsersUseCase:
    return GetWarmestUsersUseCase(uow_factory, ranking_size=settings.ranking_size)


def get_buy_trade_posts_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> GetBuyTradePostsUseCase:
    return GetBuyTradePostsUseCase(uow_factory)


def get_sell_trade_posts_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> GetSellTradePostsUseCase:
    return GetSellTradePostsUseCase(uow_factory)


def get_liked_trade_posts_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> GetLikedTradePostsUseCase:
    return GetLikedTradePostsUseCase(uow_factory)


def get_liked_neighbor_posts_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> GetLikedNeighborPostsUseCase:
    return GetLikedNeighborPostsUseCase(uow_factory, max_page_size=settings.max_page_size)


# ── trade posts ──────────────────────────────────────────────────


def get_create_trade_post_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> CreateTradePostUseCase:
    return CreateTradePostUseCase(uow_factory)


def get_trade_post_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> GetTradePostUseCase:
    return GetTradePostUseCase(uow_factory)


def get_discover_trade_posts_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> DiscoverTradePostsUseCase:
    return DiscoverTradePostsUseCase(uow_factory, max_page_size=settings.max_page_size)


def get_update_trade_post_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> UpdateTradePostUseCase:
    return UpdateTradePostUseCase(uow_factory)


def get_delete_trade_post_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> DeleteTradePostUseCase:
    return DeleteTradePostUseCase(uow_factory)


def get_reserve_trade_post_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> ReserveTradePostUseCase:
    return ReserveTradePostUseCase(uow_factory)


def get_confirm_trade_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> ConfirmTradeUseCase:
    return ConfirmTradeUseCase(uow_factory)


def get_cancel_trade_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> CancelTradeUseCase:
    return CancelTradeUseCase(uow_factory)


def get_reservation_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> GetReservationUseCase:
    return GetReservationUseCase(uow_factory)


def get_toggle_trade_post_like_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> ToggleTradePostLikeUseCase:
    return ToggleTradePostLikeUseCase(uow_factory)


def get_top_liked_posts_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> GetTopLikedPostsUseCase:
    return GetTopLikedPostsUseCase(uow_factory, ranking_size=settings.ranking_size)


# ── neighbor posts ───────────────────────────────────────────────


def get_create_neighbor_post_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> CreateNeighborPostUseCase:
    return CreateNeighborPostUseCase(uow_factory)


def get_neighbor_post_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> GetNeighborPostUseCase:
    return GetNeighborPostUseCase(uow_factory)


def get_list_neighbor_posts_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> ListNeighborPostsUseCase:
    return ListNeighborPostsUseCase(uow_factory, max_page_size=settings.max_page_size)


def get_publisher_neighbor_posts_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> GetPublisherNeighborPostsUseCase:
    return GetPublisherNeighborPostsUseCase(uow_factory)


def get_update_neighbor_post_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> UpdateNeighborPostUseCase:
    return UpdateNeighborPostUseCase(uow_factory)


def get_delete_neighbor_post_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> DeleteNeighborPostUseCase:
    return DeleteNeighborPostUseCase(uow_factory)


def get_toggle_neighbor_post_like_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> ToggleNeighborPostLikeUseCase:
    return ToggleNeighborPostLikeUseCase(uow_factory)
