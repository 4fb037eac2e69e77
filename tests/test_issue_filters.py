"""이슈 목록 필터/정렬/페이지네이션/위치 검색 테스트.

Issue listing tests — filters, search, sorting with stable tie-breaks,
page windows, limit caps and the bounding-box location filter.
"""

import math

import pytest
from httpx import AsyncClient

from tests.conftest import add_vote, days_ago, make_issue

URL = "/api/issues"


def titles(res) -> list[str]:
    return [i["title"] for i in res.json()["items"]]


class TestFilters:
    """필터 및 검색."""

    async def test_public_listing_hides_private(self, client: AsyncClient, db, citizen):
        await make_issue(db, citizen, title="Public issue one")
        await make_issue(db, citizen, title="Private issue one", is_public=False)
        res = await client.get(URL)
        assert res.status_code == 200
        assert titles(res) == ["Public issue one"]
        assert res.json()["pagination"]["totalItems"] == 1

    async def test_exact_filters(self, client: AsyncClient, db, citizen):
        await make_issue(db, citizen, title="Park bench broken", category="Parks & Recreation", priority="Low")
        await make_issue(db, citizen, title="Water main leak", category="Utilities", priority="High", status="In Progress")
        await make_issue(db, citizen, title="Power outage", category="Utilities", priority="Critical")

        res = await client.get(URL, params={"category": "Utilities"})
        assert sorted(titles(res)) == ["Power outage", "Water main leak"]

        res = await client.get(URL, params={"category": "Utilities", "status": "In Progress"})
        assert titles(res) == ["Water main leak"]

        res = await client.get(URL, params={"priority": "Low"})
        assert titles(res) == ["Park bench broken"]

    async def test_invalid_enum_filter(self, client: AsyncClient):
        res = await client.get(URL, params={"status": "Pending"})
        assert res.status_code == 400
        assert res.json()["errors"][0]["field"] == "status"

    async def test_search_title_description_and_tags(self, client: AsyncClient, db, citizen):
        await make_issue(db, citizen, title="Flooded underpass", description="Water pools after every storm.")
        await make_issue(db, citizen, title="Loose manhole cover", description="It rattles when cars drive over.")
        await make_issue(db, citizen, title="Noisy construction", description="Starts at five every morning.", tags=["FLOODING"])

        res = await client.get(URL, params={"search": "flood"})
        assert sorted(titles(res)) == ["Flooded underpass", "Noisy construction"]

        res = await client.get(URL, params={"search": "RATTLES"})
        assert titles(res) == ["Loose manhole cover"]

    async def test_status_combined_with_search(self, client: AsyncClient, db, citizen):
        await make_issue(db, citizen, title="Pothole near the school")
        await make_issue(db, citizen, title="Pothole on Elm fixed", status="Resolved")
        await make_issue(db, citizen, title="Graffiti on the bridge", description="Spray paint covers the railing.")

        res = await client.get(URL, params={"status": "Open", "search": "pothole"})
        assert titles(res) == ["Pothole near the school"]
        assert res.json()["pagination"]["totalItems"] == 1

    async def test_search_escapes_wildcards(self, client: AsyncClient, db, citizen):
        await make_issue(db, citizen, title="Discount 100% fake", description="Plain text description here.")
        await make_issue(db, citizen, title="Another ordinary issue", description="Nothing to see in this one.")
        res = await client.get(URL, params={"search": "%"})
        assert titles(res) == ["Discount 100% fake"]


class TestSorting:
    """정렬."""

    async def test_default_newest_first(self, client: AsyncClient, db, citizen):
        await make_issue(db, citizen, title="Oldest report", created_at=days_ago(3))
        await make_issue(db, citizen, title="Newest report", created_at=days_ago(1))
        await make_issue(db, citizen, title="Middle report", created_at=days_ago(2))
        res = await client.get(URL)
        assert titles(res) == ["Newest report", "Middle report", "Oldest report"]

        res = await client.get(URL, params={"sortOrder": "asc"})
        assert titles(res) == ["Oldest report", "Middle report", "Newest report"]

    async def test_priority_sorts_by_severity(self, client: AsyncClient, db, citizen):
        for title, priority in [("Medium one", "Medium"), ("Critical one", "Critical"), ("Low one", "Low"), ("High one", "High")]:
            await make_issue(db, citizen, title=title, priority=priority)
        res = await client.get(URL, params={"sortBy": "priority", "sortOrder": "desc"})
        assert titles(res) == ["Critical one", "High one", "Medium one", "Low one"]

    async def test_vote_count_sort_uses_net_votes(self, client: AsyncClient, db, citizen, other_citizen, moderator):
        liked = await make_issue(db, citizen, title="Well liked issue")
        disliked = await make_issue(db, citizen, title="Disliked issue")
        await make_issue(db, citizen, title="Unvoted issue")
        await add_vote(db, liked, other_citizen, "upvote")
        await add_vote(db, liked, moderator, "upvote")
        await add_vote(db, disliked, other_citizen, "downvote")

        res = await client.get(URL, params={"sortBy": "voteCount"})
        assert titles(res) == ["Well liked issue", "Unvoted issue", "Disliked issue"]
        assert [i["voteCount"] for i in res.json()["items"]] == [2, 0, -1]

    async def test_ties_break_by_creation_time(self, client: AsyncClient, db, citizen):
        for i, days in enumerate([5, 3, 4]):
            await make_issue(db, citizen, title=f"Same priority {i}", priority="High", created_at=days_ago(days))
        res = await client.get(URL, params={"sortBy": "priority"})
        assert titles(res) == ["Same priority 0", "Same priority 2", "Same priority 1"]

    async def test_invalid_sort_field(self, client: AsyncClient):
        res = await client.get(URL, params={"sortBy": "title"})
        assert res.status_code == 400
        assert res.json()["errors"][0]["field"] == "sortBy"


class TestPagination:
    """페이지네이션."""

    async def test_page_window_and_meta(self, client: AsyncClient, db, citizen):
        for i in range(7):
            await make_issue(db, citizen, title=f"Issue number {i}", created_at=days_ago(10 - i))

        res = await client.get(URL, params={"page": 2, "limit": 3, "sortOrder": "asc"})
        assert res.status_code == 200
        assert titles(res) == ["Issue number 3", "Issue number 4", "Issue number 5"]
        assert res.json()["pagination"] == {
            "currentPage": 2,
            "totalPages": 3,
            "totalItems": 7,
            "itemsPerPage": 3,
        }

        last = await client.get(URL, params={"page": 3, "limit": 3, "sortOrder": "asc"})
        assert titles(last) == ["Issue number 6"]

    @pytest.mark.parametrize("sort_by", ["createdAt", "voteCount", "priority", "lastActivity"])
    @pytest.mark.parametrize("sort_order", ["asc", "desc"])
    async def test_pages_cover_tied_rows_exactly_once(self, client: AsyncClient, db, citizen, sort_by, sort_order):
        same_moment = days_ago(2)
        expected = set()
        for i in range(22):
            created = await make_issue(
                db, citizen, title=f"Tied issue {i:02d}", created_at=same_moment, last_activity=same_moment
            )
            expected.add(str(created.id))
        await make_issue(db, citizen, title="Hidden tied issue", is_public=False, created_at=same_moment)

        seen: list[str] = []
        first = await client.get(URL, params={"sortBy": sort_by, "sortOrder": sort_order, "limit": 5})
        pages = first.json()["pagination"]["totalPages"]
        assert pages == math.ceil(22 / 5)
        for page in range(1, pages + 1):
            res = await client.get(
                URL, params={"sortBy": sort_by, "sortOrder": sort_order, "limit": 5, "page": page}
            )
            assert res.status_code == 200
            seen.extend(i["id"] for i in res.json()["items"])

        assert len(seen) == len(set(seen))
        assert set(seen) == expected

    async def test_page_past_end_is_empty(self, client: AsyncClient, issue):
        res = await client.get(URL, params={"page": 5})
        assert res.json()["items"] == []
        assert res.json()["pagination"]["totalItems"] == 1

    async def test_default_limit(self, client: AsyncClient, issue):
        assert (await client.get(URL)).json()["pagination"]["itemsPerPage"] == 10

    async def test_limit_above_cap_rejected(self, client: AsyncClient):
        res = await client.get(URL, params={"limit": 51})
        assert res.status_code == 400
        assert res.json()["errors"][0]["field"] == "limit"

    async def test_page_zero_rejected(self, client: AsyncClient):
        res = await client.get(URL, params={"page": 0})
        assert res.status_code == 400


class TestLocationFilter:
    """위치 반경 필터."""

    async def test_radius_filters_items_and_count(self, client: AsyncClient, db, citizen):
        await make_issue(db, citizen, title="Downtown issue", latitude=40.7128, longitude=-74.0060)
        await make_issue(db, citizen, title="Brooklyn issue", latitude=40.6782, longitude=-73.9442)
        await make_issue(db, citizen, title="Boston issue", latitude=42.3601, longitude=-71.0589)

        res = await client.get(URL, params={"lat": 40.7128, "lng": -74.0060, "radius": 10})
        assert sorted(titles(res)) == ["Brooklyn issue", "Downtown issue"]
        assert res.json()["pagination"]["totalItems"] == 2

        res = await client.get(URL, params={"lat": 40.7128, "lng": -74.0060, "radius": 1})
        assert titles(res) == ["Downtown issue"]

    async def test_default_radius_is_ten_km(self, client: AsyncClient, db, citizen):
        await make_issue(db, citizen, title="Nearby issue", latitude=40.75, longitude=-74.0)
        await make_issue(db, citizen, title="Far away issue", latitude=41.0, longitude=-74.0)
        res = await client.get(URL, params={"lat": 40.7128, "lng": -74.0060})
        assert titles(res) == ["Nearby issue"]

    async def test_lat_without_lng_rejected(self, client: AsyncClient):
        res = await client.get(URL, params={"lat": 40.7})
        assert res.status_code == 400
        body = res.json()
        assert body["message"] == "Validation failed"
        assert body["errors"][0]["field"] == "lng"

    async def test_non_positive_radius_rejected(self, client: AsyncClient):
        res = await client.get(URL, params={"lat": 40.7, "lng": -74.0, "radius": 0})
        assert res.status_code == 400
