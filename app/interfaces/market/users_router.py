"""
FastAPI router for member accounts and their activity.

All routes delegate to use cases. No business logic here.
Input validation is handled by Pydantic schemas.
Error mapping is handled by centralized error handlers.
"""

from fastapi import APIRouter, Depends, Path, Query, Request, status

from app.application.market.dtos import (
    EditLocationCommand,
    EditPasswordCommand,
    EditSearchRadiusCommand,
    EditUsernameCommand,
    LikedNeighborPostsQuery,
    RegisterUserCommand,
    UserPostsQuery,
)
from app.application.market.get_rankings import GetWarmestUsersUseCase
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
    GetLikedNeighborPostsUseCase,
    GetPublisherNeighborPostsUseCase,
)
from app.core.config import settings
from app.interfaces.market.dependencies import (
    get_buy_trade_posts_use_case,
    get_current_user_id,
    get_edit_location_use_case,
    get_edit_password_use_case,
    get_edit_search_radius_use_case,
    get_edit_username_use_case,
    get_liked_neighbor_posts_use_case,
    get_liked_trade_posts_use_case,
    get_profile_use_case,
    get_publisher_neighbor_posts_use_case,
    get_register_user_use_case,
    get_sell_trade_posts_use_case,
    get_warmest_users_use_case,
)
from app.interfaces.market.schemas import (
    ID_MAX,
    EditLocationRequest,
    EditPasswordRequest,
    EditSearchRadiusRequest,
    EditUsernameRequest,
    ErrorResponse,
    NeighborPostItem,
    RegisterUserRequest,
    TradePostItem,
    UserResponse,
    UserSummaryItem,
)
from app.shared.security.rate_limiting import limiter

router = APIRouter(prefix="/users", tags=["users"])


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse}},
    summary="Register a member",
)
@limiter.limit(settings.rate_limit_default)
def register_user(
    request: Request,
    payload: RegisterUserRequest,
    use_case: RegisterUserUseCase = Depends(get_register_user_use_case),
) -> UserResponse:
    """Create an account with the default temperature and search radius."""
    result = use_case.execute(
        RegisterUserCommand(
            username=payload.username,
            email=payload.email,
            password=payload.password,
            location=payload.location,
            latitude=payload.latitude,
            longitude=payload.longitude,
        )
    )
    return UserResponse.model_validate(result, from_attributes=True)


@router.get("/me", response_model=UserResponse, summary="Own profile")
def get_my_profile(
    user_id: int = Depends(get_current_user_id),
    use_case: GetProfileUseCase = Depends(get_profile_use_case),
) -> UserResponse:
    return UserResponse.model_validate(use_case.execute(user_id), from_attributes=True)


@router.get(
    "/warmest",
    response_model=list[UserSummaryItem],
    summary="Warmest members",
    description="Members with the highest temperature, ties broken by lowest id.",
)
def get_warmest_users(
    use_case: GetWarmestUsersUseCase = Depends(get_warmest_users_use_case),
) -> list[UserSummaryItem]:
    return [
        UserSummaryItem.model_validate(u, from_attributes=True) for u in use_case.execute()
    ]


@router.patch("/me/username", response_model=UserResponse, summary="Rename")
def edit_username(
    payload: EditUsernameRequest,
    user_id: int = Depends(get_current_user_id),
    use_case: EditUsernameUseCase = Depends(get_edit_username_use_case),
) -> UserResponse:
    result = use_case.execute(EditUsernameCommand(user_id=user_id, username=payload.username))
    return UserResponse.model_validate(result, from_attributes=True)


@router.patch("/me/location", response_model=UserResponse, summary="Move")
def edit_location(
    payload: EditLocationRequest,
    user_id: int = Depends(get_current_user_id),
    use_case: EditLocationUseCase = Depends(get_edit_location_use_case),
) -> UserResponse:
    result = use_case.execute(
        EditLocationCommand(
            user_id=user_id,
            location=payload.location,
            latitude=payload.latitude,
            longitude=payload.longitude,
        )
    )
    return UserResponse.model_validate(result, from_attributes=True)


@router.patch(
    "/me/search-radius", response_model=UserResponse, summary="Change discovery radius"
)
def edit_search_radius(
    payload: EditSearchRadiusRequest,
    user_id: int = Depends(get_current_user_id),
    use_case: EditSearchRadiusUseCase = Depends(get_edit_search_radius_use_case),
) -> UserResponse:
    result = use_case.execute(
        EditSearchRadiusCommand(user_id=user_id, radius_km=payload.radius_km)
    )
    return UserResponse.model_validate(result, from_attributes=True)


@router.patch(
    "/me/password",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={403: {"model": ErrorResponse}},
    summary="Change password",
)
def edit_password(
    payload: EditPasswordRequest,
    user_id: int = Depends(get_current_user_id),
    use_case: EditPasswordUseCase = Depends(get_edit_password_use_case),
) -> None:
    use_case.execute(
        EditPasswordCommand(
            user_id=user_id,
            current_password=payload.current_password,
            new_password=payload.new_password,
            confirm_password=payload.confirm_password,
        )
    )


@router.get(
    "/me/buy-posts",
    response_model=list[TradePostItem],
    summary="Completed purchases",
)
def get_buy_posts(
    user_id: int = Depends(get_current_user_id),
    use_case: GetBuyTradePostsUseCase = Depends(get_buy_trade_posts_use_case),
) -> list[TradePostItem]:
    results = use_case.execute(UserPostsQuery(viewer_id=user_id, user_id=user_id))
    return [TradePostItem.model_validate(r, from_attributes=True) for r in results]


@router.get(
    "/me/like-posts",
    response_model=list[TradePostItem],
    summary="Liked trade posts",
)
def get_like_posts(
    user_id: int = Depends(get_current_user_id),
    use_case: GetLikedTradePostsUseCase = Depends(get_liked_trade_posts_use_case),
) -> list[TradePostItem]:
    results = use_case.execute(UserPostsQuery(viewer_id=user_id, user_id=user_id))
    return [TradePostItem.model_validate(r, from_attributes=True) for r in results]


@router.get(
    "/me/like-neighbor-posts",
    response_model=list[NeighborPostItem],
    summary="Liked neighbor posts",
)
def get_like_neighbor_posts(
    page: int = Query(default=0, ge=0),
    size: int = Query(default=20, ge=1),
    user_id: int = Depends(get_current_user_id),
    use_case: GetLikedNeighborPostsUseCase = Depends(get_liked_neighbor_posts_use_case),
) -> list[NeighborPostItem]:
    results = use_case.execute(LikedNeighborPostsQuery(user_id=user_id, page=page, size=size))
    return [NeighborPostItem.model_validate(r, from_attributes=True) for r in results]


@router.get(
    "/{target_id}",
    response_model=UserResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Member profile",
)
def get_profile(
    target_id: int = Path(..., ge=1, le=ID_MAX),
    _user_id: int = Depends(get_current_user_id),
    use_case: GetProfileUseCase = Depends(get_profile_use_case),
) -> UserResponse:
    return UserResponse.model_validate(use_case.execute(target_id), from_attributes=True)


@router.get(
    "/{target_id}/sell-posts",
    response_model=list[TradePostItem],
    summary="A seller's trade posts",
)
def get_sell_posts(
    target_id: int = Path(..., ge=1, le=ID_MAX),
    user_id: int = Depends(get_current_user_id),
    use_case: GetSellTradePostsUseCase = Depends(get_sell_trade_posts_use_case),
) -> list[TradePostItem]:
    results = use_case.execute(UserPostsQuery(viewer_id=user_id, user_id=target_id))
    return [TradePostItem.model_validate(r, from_attributes=True) for r in results]


@router.get(
    "/{target_id}/neighbor-posts",
    response_model=list[NeighborPostItem],
    summary="A member's neighbor posts",
)
def get_publisher_neighbor_posts(
    target_id: int = Path(..., ge=1, le=ID_MAX),
    user_id: int = Depends(get_current_user_id),
    use_case: GetPublisherNeighborPostsUseCase = Depends(
        get_publisher_neighbor_posts_use_case
    ),
) -> list[NeighborPostItem]:
    results = use_case.execute(UserPostsQuery(viewer_id=user_id, user_id=target_id))
    return [NeighborPostItem.model_validate(r, from_attributes=True) for r in results]
