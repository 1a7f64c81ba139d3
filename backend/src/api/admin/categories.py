"""
Admin categories API endpoints.
"""

from fastapi import APIRouter, Depends, status

from backend.src.api.dependencies import get_category_service
from backend.src.schemas.category import CategoryCreate, CategoryResponse
from backend.src.services.category_service import CategoryService


router = APIRouter(
    prefix="/admin/categories",
    tags=["Admin"],
)


@router.post(
    "",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a category",
)
def create_category(
    category: CategoryCreate,
    category_service: CategoryService = Depends(get_category_service),
) -> CategoryResponse:
    """Create a category; 409 when the name is taken (case-insensitive)."""
    return CategoryResponse.model_validate(category_service.create(name=category.name))
