"""페이지네이션 계산 테스트."""

import pytest

from app.utils.pagination import build_page, page_window, total_pages


class TestPageWindow:

    @pytest.mark.parametrize(
        ("page", "per_page", "expected"),
        [(1, 10, (0, 10)), (2, 10, (10, 10)), (5, 3, (12, 3))],
    )
    def test_offsets(self, page, per_page, expected):
        assert page_window(page, per_page) == expected

    @pytest.mark.parametrize(("page", "per_page"), [(0, 10), (1, 0), (-3, 5)])
    def test_rejects_non_positive(self, page, per_page):
        with pytest.raises(ValueError):
            page_window(page, per_page)


class TestTotalPages:

    @pytest.mark.parametrize(
        ("total", "per_page", "expected"),
        [(0, 10, 0), (1, 10, 1), (10, 10, 1), (11, 10, 2), (101, 50, 3)],
    )
    def test_ceiling(self, total, per_page, expected):
        assert total_pages(total, per_page) == expected


def test_build_page_envelope():
    page = build_page([{"id": "a"}], total=21, page=3, per_page=10)
    assert page == {
        "items": [{"id": "a"}],
        "pagination": {"currentPage": 3, "totalPages": 3, "totalItems": 21, "itemsPerPage": 10},
    }
