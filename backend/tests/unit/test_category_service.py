"""
Unit tests for CategoryService.
"""

import pytest

from backend.src.services.category_service import CategoryService
from backend.src.services.exceptions import ConflictError, NotFoundError, ValidationError


@pytest.fixture
def category_service(test_db_session):
    """Create a CategoryService instance for testing."""
    return CategoryService(test_db_session)


class TestCategoryService:

    def test_create_category(self, category_service):
        category = category_service.create(name=" Concerts ")

        assert category.id is not None
        assert category.name == "Concerts"

    def test_duplicate_name_case_insensitive(self, category_service):
        category_service.create(name="Concerts")

        with pytest.raises(ConflictError):
            category_service.create(name="concerts")

    def test_blank_name(self, category_service):
        with pytest.raises(ValidationError):
            category_service.create(name="  ")

    def test_get_unknown(self, category_service):
        with pytest.raises(NotFoundError):
            category_service.get_by_id(404)

    def test_list_pages(self, category_service, sample_category):
        categories = [sample_category() for _ in range(3)]

        assert [c.id for c in category_service.list(from_=0, size=2)] == [
            categories[0].id, categories[1].id
        ]
        assert [c.id for c in category_service.list(from_=2, size=2)] == [categories[2].id]
