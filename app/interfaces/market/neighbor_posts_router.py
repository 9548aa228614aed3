"""
FastAPI router for the neighbor (community) feed.

All routes delegate to use cases. No business logic here.
"""

from fastapi import APIRouter, Depends, Path, Query, Request, status

from app.application.market.dtos import (
    CreateNeighborPostCommand,
    ListNeighborPostsQuery,
    NeighborPostActionCommand,
    UpdateNeighborPostCommand,
)
from app.application.market.neighbor_posts import (
    CreateNeighborPostUseCase,
    DeleteNeighborPostUseCase,
    GetNeighborPostUseCase,
    ListNeighborPostsUseCase,
    ToggleNeighborPostLikeUseCase,
    UpdateNeighborPostUseCase,
)
from app.core.config import settings
from app.interfaces.market.dependencies import (
    get_create_neighbor_post_use_case,
    get_current_user_id,
    get_delete_neighbor_post_use_case,
    get_list_neighbor_posts_use_case,
    get_neighbor_post_use_case,
    get_toggle_neighbor_post_like_use_case,
    get_update_neighbor_post_use_case,
)
from app.interfaces.market.schemas import (
    ID_MAX,
    ErrorResponse,
    LikeToggleResponse,
    NeighborPostItem,
    NeighborPostRequest,
)
from app.shared.security.rate_limiting import limiter

router = APIRouter(prefix="/neighbor-posts", tags=["neighbor-posts"])

OWNER_ONLY = {403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}}


@router.post(
    "",
    response_model=NeighborPostItem,
    status_code=status.HTTP_201_CREATED,
    summary="Publish to the neighbor feed",
)
@limiter.limit(settings.rate_limit_default)
def create_neighbor_post(
    request: Request,
    payload: NeighborPostRequest,
    user_id: int = Depends(get_current_user_id),
    use_case: CreateNeighborPostUseCase = Depends(get_create_neighbor_post_use_case),
) -> NeighborPostItem:
    result = use_case.execute(CreateNeighborPostCommand(user_id=user_id, content=payload.content))
    return NeighborPostItem.model_validate(result, from_attributes=True)


@router.get(
    "",
    response_model=list[NeighborPostItem],
    summary="Neighbor feed",
    description="Newest first, optionally filtered by a keyword in the content.",
)
def list_neighbor_posts(
    keyword: str = Query(default="", max_length=100),
    page: int = Query(default=0, ge=0),
    size: int = Query(default=20, ge=1),
    user_id: int = Depends(get_current_user_id),
    use_case: ListNeighborPostsUseCase = Depends(get_list_neighbor_posts_use_case),
) -> list[NeighborPostItem]:
    results = use_case.execute(
        ListNeighborPostsQuery(user_id=user_id, keyword=keyword, page=page, size=size)
    )
    return [NeighborPostItem.model_validate(r, from_attributes=True) for r in results]


@router.get(
    "/{post_id}",
    response_model=NeighborPostItem,
    responses={404: {"model": ErrorResponse}},
    summary="Read a neighbor post",
)
def get_neighbor_post(
    post_id: int = Path(..., ge=1, le=ID_MAX),
    user_id: int = Depends(get_current_user_id),
    use_case: GetNeighborPostUseCase = Depends(get_neighbor_post_use_case),
) -> NeighborPostItem:
    result = use_case.execute(NeighborPostActionCommand(user_id=user_id, post_id=post_id))
    return NeighborPostItem.model_validate(result, from_attributes=True)


@router.put(
    "/{post_id}",
    response_model=NeighborPostItem,
    responses=OWNER_ONLY,
    summary="Edit a neighbor post",
)
def update_neighbor_post(
    payload: NeighborPostRequest,
    post_id: int = Path(..., ge=1, le=ID_MAX),
    user_id: int = Depends(get_current_user_id),
    use_case: UpdateNeighborPostUseCase = Depends(get_update_neighbor_post_use_case),
) -> NeighborPostItem:
    result = use_case.execute(
        UpdateNeighborPostCommand(user_id=user_id, post_id=post_id, content=payload.content)
    )
    return NeighborPostItem.model_validate(result, from_attributes=True)


@router.delete(
    "/{post_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=OWNER_ONLY,
    summary="Delete a neighbor post",
)
def delete_neighbor_post(
    post_id: int = Path(..., ge=1, le=ID_MAX),
    user_id: int = Depends(get_current_user_id),
    use_case: DeleteNeighborPostUseCase = Depends(get_delete_neighbor_post_use_case),
) -> None:
    use_case.execute(NeighborPostActionCommand(user_id=user_id, post_id=post_id))


@router.post(
    "/{post_id}/like",
    response_model=LikeToggleResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Like or unlike",
)
def toggle_neighbor_like(
    post_id: int = Path(..., ge=1, le=ID_MAX),
    user_id: int = Depends(get_current_user_id),
    use_case: ToggleNeighborPostLikeUseCase = Depends(
        get_toggle_neighbor_post_like_use_case
    ),
) -> LikeToggleResponse:
    result = use_case.execute(NeighborPostActionCommand(user_id=user_id, post_id=post_id))
    return LikeToggleResponse.model_validate(result, from_attributes=True)
