"""
User endpoints - RESTful resource (GET/POST/PUT/PATCH/DELETE) under /api/users.
Design: Thin controller; UserService holds validation and error translation.
"""

from fastapi import APIRouter, Query, status

from app.config import get_settings
from app.core.dependencies import UserServiceDep
from app.core.pagination import PageRequest
from app.schemas.common import ApiResponse, Page
from app.schemas.user import UserCreate, UserDetail, UserPublic, UserResponse, UserUpdate

router = APIRouter()
settings = get_settings()


@router.get(
    "",
    response_model=ApiResponse[Page[UserPublic]],
    response_model_exclude_unset=True,
)
async def list_users(
    service: UserServiceDep,
    page: str | None = Query(None),
    limit: str | None = Query(None),
):
    """List users newest first. REST: GET /users?page=1&limit=10 (limit max 50)."""
    page_request = PageRequest.from_query(
        page,
        limit,
        default_limit=settings.default_page_size,
        max_limit=settings.max_page_size,
    )
    result = await service.list_users(page_request)
    return ApiResponse[Page[UserPublic]](success=True, data=result)


@router.get(
    "/{user_id}",
    response_model=ApiResponse[UserDetail],
    response_model_exclude_unset=True,
)
async def get_user(service: UserServiceDep, user_id: str):
    """Single user including email and counts."""
    user = await service.get_user(user_id)
    return ApiResponse[UserDetail](success=True, data=user)


@router.post(
    "",
    response_model=ApiResponse[UserResponse],
    response_model_exclude_unset=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_user(service: UserServiceDep, data: UserCreate):
    """Create user. 409 when email or username is taken."""
    user = await service.create_user(data)
    return ApiResponse[UserResponse](
        success=True, data=user, message="User created successfully"
    )


@router.api_route(
    "/{user_id}",
    methods=["PUT", "PATCH"],
    response_model=ApiResponse[UserResponse],
    response_model_exclude_unset=True,
)
async def update_user(service: UserServiceDep, user_id: str, data: UserUpdate):
    """Partial update: only fields present in the body change."""
    user = await service.update_user(user_id, data)
    return ApiResponse[UserResponse](
        success=True, data=user, message="User updated successfully"
    )


@router.delete(
    "/{user_id}",
    response_model=ApiResponse[None],
    response_model_exclude_unset=True,
)
async def delete_user(service: UserServiceDep, user_id: str):
    await service.delete_user(user_id)
    return ApiResponse[None](success=True, message="User deleted successfully")
