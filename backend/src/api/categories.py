"""
Public categories API endpoints.

Provides:
- List categories (paged)
- Get category details
"""

from typing import List

from fastapi import APIRouter, Depends, Query

from backend.src.api.dependencies import get_category_service
from backend.src.schemas.category import CategoryResponse
from backend.src.services.category_service import CategoryService


router = APIRouter(
    prefix="/categories",
    tags=["Categories"],
)


@router.get(
    "",
    response_model=List[CategoryResponse],
    summary="List categories",
)
def list_categories(
    from_: int = Query(0, alias="from", ge=0),
    size: int = Query(10, ge=1),
    category_service: CategoryService = Depends(get_category_service),
) -> List[CategoryResponse]:
    categories = category_service.list(from_=from_, size=size)
    return [CategoryResponse.model_validate(c) for c in categories]


@router.get(
    "/{category_id}",
    response_model=CategoryResponse,
    summary="Get category details",
)
def get_category(
    category_id: int,
    category_service: CategoryService = Depends(get_category_service),
) -> CategoryResponse:
    return CategoryResponse.model_validate(category_service.get_by_id(category_id))
