"""이슈 CRUD API 테스트.

Issue API tests — submission and validation, detail view with view
counting, private and anonymous visibility, edits and deletion.
"""

import uuid

from httpx import AsyncClient
from sqlalchemy import func, select

from app.models.issue import Issue, IssueComment, IssueTag, IssueVote
from tests.conftest import add_comment, add_vote, auth_header, make_issue

URL = "/api/issues"


def issue_payload(**overrides) -> dict:
    payload = {
        "title": "Broken streetlight",
        "description": "The streetlight at the corner has been out for a week.",
        "category": "Public Safety",
        "priority": "High",
        "location": {
            "address": "12 Elm St",
            "coordinates": {"lat": 40.71, "lng": -74.0},
            "city": "New York",
            "zipCode": "10001",
        },
        "images": [{"url": "https://img.example.com/1.jpg", "caption": "Night view"}],
        "tags": ["lighting", "night"],
    }
    payload.update(overrides)
    return payload


class TestIssueCreate:
    """이슈 등록 테스트."""

    async def test_create_issue(self, client: AsyncClient, citizen, citizen_token):
        res = await client.post(URL, json=issue_payload(), headers=auth_header(citizen_token))
        assert res.status_code == 201
        body = res.json()
        assert body["message"] == "Issue created successfully"
        issue = body["issue"]
        assert issue["title"] == "Broken streetlight"
        assert issue["status"] == "Open"
        assert issue["priority"] == "High"
        assert issue["reporter"]["id"] == str(citizen.id)
        assert issue["location"]["coordinates"] == {"lat": 40.71, "lng": -74.0}
        assert issue["location"]["zipCode"] == "10001"
        assert issue["images"] == [{"url": "https://img.example.com/1.jpg", "caption": "Night view"}]
        assert issue["tags"] == ["lighting", "night"]
        assert issue["voteCount"] == 0
        assert issue["viewCount"] == 0
        assert issue["isPublic"] is True
        assert issue["isAnonymous"] is False
        assert issue["comments"] == []

    async def test_defaults_and_trimming(self, client: AsyncClient, citizen_token):
        payload = issue_payload(title="   Graffiti wall   ", tags=[" art ", "", "art"])
        payload.pop("priority")
        payload.pop("images")
        res = await client.post(URL, json=payload, headers=auth_header(citizen_token))
        assert res.status_code == 201
        issue = res.json()["issue"]
        assert issue["title"] == "Graffiti wall"
        assert issue["priority"] == "Medium"
        assert issue["tags"] == ["art"]
        assert issue["images"] == []

    async def test_title_too_short(self, client: AsyncClient, citizen_token):
        res = await client.post(URL, json=issue_payload(title="  Hole  "), headers=auth_header(citizen_token))
        assert res.status_code == 400
        body = res.json()
        assert body["message"] == "Validation failed"
        assert any(e["field"] == "title" for e in body["errors"])

    async def test_invalid_category(self, client: AsyncClient, citizen_token):
        res = await client.post(URL, json=issue_payload(category="Aliens"), headers=auth_header(citizen_token))
        assert res.status_code == 400
        assert any(e["field"] == "category" for e in res.json()["errors"])

    async def test_latitude_out_of_range(self, client: AsyncClient, citizen_token):
        payload = issue_payload()
        payload["location"]["coordinates"]["lat"] = 91
        res = await client.post(URL, json=payload, headers=auth_header(citizen_token))
        assert res.status_code == 400
        assert any(e["field"] == "location.coordinates.lat" for e in res.json()["errors"])

    async def test_requires_auth(self, client: AsyncClient):
        res = await client.post(URL, json=issue_payload())
        assert res.status_code == 401

    async def test_invalid_token(self, client: AsyncClient):
        res = await client.post(URL, json=issue_payload(), headers=auth_header("not-a-jwt"))
        assert res.status_code == 401

    async def test_inactive_user_rejected(self, client: AsyncClient, db, citizen, citizen_token):
        citizen.is_active = False
        await db.commit()
        res = await client.post(URL, json=issue_payload(), headers=auth_header(citizen_token))
        assert res.status_code == 401


class TestIssueDetail:
    """이슈 상세 조회 테스트."""

    async def test_detail_increments_view_count(self, client: AsyncClient, issue):
        first = await client.get(f"{URL}/{issue.id}")
        second = await client.get(f"{URL}/{issue.id}")
        assert first.status_code == 200
        assert first.json()["viewCount"] == 1
        assert second.json()["viewCount"] == 2

    async def test_detail_includes_comments_in_order(self, client: AsyncClient, db, issue, citizen, other_citizen):
        await add_comment(db, issue, citizen, "First")
        await add_comment(db, issue, other_citizen, "Second")
        res = await client.get(f"{URL}/{issue.id}")
        body = res.json()
        assert [c["content"] for c in body["comments"]] == ["First", "Second"]
        assert body["comments"][1]["user"]["name"] == "Bob Neighbor"
        assert body["commentCount"] == 2

    async def test_anonymous_viewer_has_no_user_vote(self, client: AsyncClient, issue):
        res = await client.get(f"{URL}/{issue.id}")
        assert "userVote" not in res.json()

    async def test_unknown_issue(self, client: AsyncClient):
        res = await client.get(f"{URL}/{uuid.uuid4()}")
        assert res.status_code == 404
        assert res.json()["detail"] == "Issue not found"

    async def test_malformed_id(self, client: AsyncClient):
        res = await client.get(f"{URL}/not-a-uuid")
        assert res.status_code == 400

    async def test_private_issue_hidden_from_others(self, client: AsyncClient, db, citizen, other_token):
        private = await make_issue(db, citizen, is_public=False)
        assert (await client.get(f"{URL}/{private.id}")).status_code == 404
        res = await client.get(f"{URL}/{private.id}", headers=auth_header(other_token))
        assert res.status_code == 404

    async def test_private_issue_visible_to_owner_and_staff(
        self, client: AsyncClient, db, citizen, citizen_token, moderator_token
    ):
        private = await make_issue(db, citizen, is_public=False)
        assert (await client.get(f"{URL}/{private.id}", headers=auth_header(citizen_token))).status_code == 200
        assert (await client.get(f"{URL}/{private.id}", headers=auth_header(moderator_token))).status_code == 200

    async def test_anonymous_issue_hides_reporter(
        self, client: AsyncClient, db, citizen, citizen_token, other_token, admin_token
    ):
        anon = await make_issue(db, citizen, is_anonymous=True)
        url = f"{URL}/{anon.id}"
        assert (await client.get(url)).json()["reporter"] is None
        assert (await client.get(url, headers=auth_header(other_token))).json()["reporter"] is None
        assert (await client.get(url, headers=auth_header(citizen_token))).json()["reporter"]["id"] == str(citizen.id)
        assert (await client.get(url, headers=auth_header(admin_token))).json()["reporter"]["id"] == str(citizen.id)


class TestIssueUpdate:
    """이슈 수정 테스트."""

    async def test_owner_updates_fields(self, client: AsyncClient, issue, citizen_token):
        res = await client.put(
            f"{URL}/{issue.id}",
            json={"title": "Huge pothole on Main", "priority": "Critical"},
            headers=auth_header(citizen_token),
        )
        assert res.status_code == 200
        body = res.json()
        assert body["message"] == "Issue updated successfully"
        assert body["issue"]["title"] == "Huge pothole on Main"
        assert body["issue"]["priority"] == "Critical"
        assert body["issue"]["description"] == "A deep pothole near the bus stop damages cars."

    async def test_update_replaces_tags(self, client: AsyncClient, db, issue, citizen_token):
        res = await client.put(
            f"{URL}/{issue.id}", json={"tags": ["safety", "urgent"]}, headers=auth_header(citizen_token)
        )
        assert res.status_code == 200
        assert res.json()["issue"]["tags"] == ["safety", "urgent"]
        rows = await db.scalar(select(func.count()).select_from(IssueTag).where(IssueTag.issue_id == issue.id))
        assert rows == 2

    async def test_moderator_may_update(self, client: AsyncClient, issue, moderator_token):
        res = await client.put(
            f"{URL}/{issue.id}", json={"description": "Updated by the moderation team."},
            headers=auth_header(moderator_token),
        )
        assert res.status_code == 200

    async def test_other_citizen_forbidden(self, client: AsyncClient, issue, other_token):
        res = await client.put(f"{URL}/{issue.id}", json={"title": "Hijacked title"}, headers=auth_header(other_token))
        assert res.status_code == 403
        assert res.json()["detail"] == "Not authorized to update this issue"

    async def test_update_validation(self, client: AsyncClient, issue, citizen_token):
        res = await client.put(f"{URL}/{issue.id}", json={"description": "short"}, headers=auth_header(citizen_token))
        assert res.status_code == 400


class TestIssueDelete:
    """이슈 삭제 테스트."""

    async def test_owner_deletes_with_children(self, client: AsyncClient, db, issue, citizen, other_citizen, citizen_token):
        await add_vote(db, issue, other_citizen)
        await add_comment(db, issue, other_citizen)
        res = await client.delete(f"{URL}/{issue.id}", headers=auth_header(citizen_token))
        assert res.status_code == 200
        assert res.json() == {"message": "Issue deleted successfully"}

        for model in (Issue, IssueVote, IssueComment, IssueTag):
            assert await db.scalar(select(func.count()).select_from(model)) == 0

    async def test_admin_may_delete(self, client: AsyncClient, issue, admin_token):
        res = await client.delete(f"{URL}/{issue.id}", headers=auth_header(admin_token))
        assert res.status_code == 200

    async def test_moderator_may_not_delete(self, client: AsyncClient, issue, moderator_token):
        res = await client.delete(f"{URL}/{issue.id}", headers=auth_header(moderator_token))
        assert res.status_code == 403

    async def test_other_citizen_may_not_delete(self, client: AsyncClient, issue, other_token):
        res = await client.delete(f"{URL}/{issue.id}", headers=auth_header(other_token))
        assert res.status_code == 403

    async def test_delete_unknown(self, client: AsyncClient, citizen_token):
        res = await client.delete(f"{URL}/{uuid.uuid4()}", headers=auth_header(citizen_token))
        assert res.status_code == 404
