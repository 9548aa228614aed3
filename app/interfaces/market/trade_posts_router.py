"""
FastAPI router for trade posts: listing, discovery, reservation, likes.

All routes delegate to use cases. No business logic here.
Input validation is handled by Pydantic schemas.
Error mapping is handled by centralized error handlers.
"""

from fastapi import APIRouter, Depends, Path, Query, Request, status

from app.application.market.create_trade_post import CreateTradePostUseCase
from app.application.market.delete_trade_post import DeleteTradePostUseCase
from app.application.market.discover_trade_posts import DiscoverTradePostsUseCase
from app.application.market.dtos import (
    CreateTradePostCommand,
    DiscoverTradePostsQuery,
    ReserveTradePostCommand,
    TradePostActionCommand,
    UpdateTradePostCommand,
)
from app.application.market.get_rankings import GetTopLikedPostsUseCase
from app.application.market.get_trade_post import GetTradePostUseCase
from app.application.market.toggle_trade_post_like import ToggleTradePostLikeUseCase
from app.application.market.trade_reservation import (
    CancelTradeUseCase,
    ConfirmTradeUseCase,
    GetReservationUseCase,
    ReserveTradePostUseCase,
)
from app.application.market.update_trade_post import UpdateTradePostUseCase
from app.core.config import settings
from app.interfaces.market.dependencies import (
    get_cancel_trade_use_case,
    get_confirm_trade_use_case,
    get_create_trade_post_use_case,
    get_current_user_id,
    get_delete_trade_post_use_case,
    get_discover_trade_posts_use_case,
    get_reservation_use_case,
    get_reserve_trade_post_use_case,
    get_toggle_trade_post_like_use_case,
    get_top_liked_posts_use_case,
    get_trade_post_use_case,
    get_update_trade_post_use_case,
)
from app.interfaces.market.schemas import (
    ID_MAX,
    CreateTradePostRequest,
    ErrorResponse,
    LikeToggleResponse,
    ReservationResponse,
    ReserveTradePostRequest,
    TradePostDetailResponse,
    TradePostItem,
    TradePostPageResponse,
    UpdateTradePostRequest,
)
from app.shared.security.rate_limiting import limiter

router = APIRouter(prefix="/trade-posts", tags=["trade-posts"])

NOT_FOUND = {404: {"model": ErrorResponse}}
OWNER_ONLY = {403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}}
TRANSITION = {
    400: {"model": ErrorResponse},
    403: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
}


@router.post(
    "",
    response_model=TradePostItem,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
    summary="List an item for sale",
)
@limiter.limit(settings.rate_limit_default)
def create_trade_post(
    request: Request,
    payload: CreateTradePostRequest,
    user_id: int = Depends(get_current_user_id),
    use_case: CreateTradePostUseCase = Depends(get_create_trade_post_use_case),
) -> TradePostItem:
    """Create a post; its coordinate defaults to the seller's."""
    result = use_case.execute(
        CreateTradePostCommand(
            user_id=user_id,
            title=payload.title,
            description=payload.description,
            price=payload.price,
            image_urls=payload.image_urls,
            latitude=payload.latitude,
            longitude=payload.longitude,
        )
    )
    return TradePostItem.model_validate(result, from_attributes=True)


@router.get(
    "",
    response_model=TradePostPageResponse,
    responses={400: {"model": ErrorResponse}, 429: {"model": ErrorResponse}},
    summary="Discover nearby trade posts",
    description=(
        "Posts within the caller's search radius, optionally filtered by a "
        "keyword on title or description, newest first."
    ),
)
@limiter.limit(settings.rate_limit_heavy)
def discover_trade_posts(
    request: Request,
    keyword: str = Query(default="", max_length=100),
    page: int = Query(default=0, ge=0),
    size: int = Query(default=20, ge=1),
    trading: bool = Query(default=False, description="Hide completed trades"),
    user_id: int = Depends(get_current_user_id),
    use_case: DiscoverTradePostsUseCase = Depends(get_discover_trade_posts_use_case),
) -> TradePostPageResponse:
    result = use_case.execute(
        DiscoverTradePostsQuery(
            user_id=user_id,
            keyword=keyword,
            page=page,
            size=size,
            trading_only=trading,
        )
    )
    return TradePostPageResponse.model_validate(result, from_attributes=True)


@router.get(
    "/top-liked",
    response_model=list[TradePostItem],
    summary="Most-liked trade posts",
)
def get_top_liked_posts(
    user_id: int = Depends(get_current_user_id),
    use_case: GetTopLikedPostsUseCase = Depends(get_top_liked_posts_use_case),
) -> list[TradePostItem]:
    return [
        TradePostItem.model_validate(r, from_attributes=True)
        for r in use_case.execute(user_id)
    ]


@router.get(
    "/{post_id}",
    response_model=TradePostDetailResponse,
    responses=NOT_FOUND,
    summary="Read a trade post",
    description="Returns the post with both parties. Every read counts as a view.",
)
def get_trade_post(
    post_id: int = Path(..., ge=1, le=ID_MAX),
    user_id: int = Depends(get_current_user_id),
    use_case: GetTradePostUseCase = Depends(get_trade_post_use_case),
) -> TradePostDetailResponse:
    result = use_case.execute(TradePostActionCommand(user_id=user_id, post_id=post_id))
    return TradePostDetailResponse.model_validate(result, from_attributes=True)


@router.put(
    "/{post_id}",
    response_model=TradePostItem,
    responses=OWNER_ONLY,
    summary="Edit a trade post",
)
def update_trade_post(
    payload: UpdateTradePostRequest,
    post_id: int = Path(..., ge=1, le=ID_MAX),
    user_id: int = Depends(get_current_user_id),
    use_case: UpdateTradePostUseCase = Depends(get_update_trade_post_use_case),
) -> TradePostItem:
    result = use_case.execute(
        UpdateTradePostCommand(
            user_id=user_id,
            post_id=post_id,
            title=payload.title,
            description=payload.description,
            price=payload.price,
            image_urls=payload.image_urls,
        )
    )
    return TradePostItem.model_validate(result, from_attributes=True)


@router.delete(
    "/{post_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=TRANSITION,
    summary="Delete a trade post",
)
def delete_trade_post(
    post_id: int = Path(..., ge=1, le=ID_MAX),
    user_id: int = Depends(get_current_user_id),
    use_case: DeleteTradePostUseCase = Depends(get_delete_trade_post_use_case),
) -> None:
    use_case.execute(TradePostActionCommand(user_id=user_id, post_id=post_id))


@router.get(
    "/{post_id}/reservation",
    response_model=ReservationResponse,
    responses=OWNER_ONLY,
    summary="Current reservation",
)
def get_reservation(
    post_id: int = Path(..., ge=1, le=ID_MAX),
    user_id: int = Depends(get_current_user_id),
    use_case: GetReservationUseCase = Depends(get_reservation_use_case),
) -> ReservationResponse:
    result = use_case.execute(TradePostActionCommand(user_id=user_id, post_id=post_id))
    return ReservationResponse.model_validate(result, from_attributes=True)


@router.post(
    "/{post_id}/reservation",
    response_model=ReservationResponse,
    responses=TRANSITION,
    summary="Reserve for a buyer",
)
def reserve_trade_post(
    payload: ReserveTradePostRequest,
    post_id: int = Path(..., ge=1, le=ID_MAX),
    user_id: int = Depends(get_current_user_id),
    use_case: ReserveTradePostUseCase = Depends(get_reserve_trade_post_use_case),
) -> ReservationResponse:
    result = use_case.execute(
        ReserveTradePostCommand(seller_id=user_id, buyer_id=payload.buyer_id, post_id=post_id)
    )
    return ReservationResponse.model_validate(result, from_attributes=True)


@router.delete(
    "/{post_id}/reservation",
    response_model=ReservationResponse,
    responses=TRANSITION,
    summary="Cancel the reservation",
)
def cancel_reservation(
    post_id: int = Path(..., ge=1, le=ID_MAX),
    user_id: int = Depends(get_current_user_id),
    use_case: CancelTradeUseCase = Depends(get_cancel_trade_use_case),
) -> ReservationResponse:
    result = use_case.execute(TradePostActionCommand(user_id=user_id, post_id=post_id))
    return ReservationResponse.model_validate(result, from_attributes=True)


@router.post(
    "/{post_id}/confirm",
    response_model=ReservationResponse,
    responses=TRANSITION,
    summary="Complete the trade",
)
def confirm_trade(
    post_id: int = Path(..., ge=1, le=ID_MAX),
    user_id: int = Depends(get_current_user_id),
    use_case: ConfirmTradeUseCase = Depends(get_confirm_trade_use_case),
) -> ReservationResponse:
    result = use_case.execute(TradePostActionCommand(user_id=user_id, post_id=post_id))
    return ReservationResponse.model_validate(result, from_attributes=True)


@router.post(
    "/{post_id}/like",
    response_model=LikeToggleResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Like or unlike",
)
def toggle_like(
    post_id: int = Path(..., ge=1, le=ID_MAX),
    user_id: int = Depends(get_current_user_id),
    use_case: ToggleTradePostLikeUseCase = Depends(get_toggle_trade_post_like_use_case),
) -> LikeToggleResponse:
    result = use_case.execute(TradePostActionCommand(user_id=user_id, post_id=post_id))
    return LikeToggleResponse.model_validate(result, from_attributes=True)
