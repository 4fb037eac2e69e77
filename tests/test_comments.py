"""댓글 API 테스트.

Comment tests — append order, official-comment permission, trimming and
length limits, and visibility of private issues.
"""

from httpx import AsyncClient

from tests.conftest import auth_header, make_issue


class TestAddComment:
    """POST /api/issues/{id}/comments"""

    async def test_citizen_comment(self, client: AsyncClient, issue, other_citizen, other_token):
        res = await client.post(
            f"/api/issues/{issue.id}/comments",
            json={"content": "  I saw this too  "},
            headers=auth_header(other_token),
        )
        assert res.status_code == 200
        body = res.json()
        assert body["message"] == "Comment added successfully"
        assert body["comment"]["content"] == "I saw this too"
        assert body["comment"]["isOfficial"] is False
        assert body["comment"]["user"]["id"] == str(other_citizen.id)

    async def test_comments_append_in_order(self, client: AsyncClient, issue, citizen_token, other_token):
        url = f"/api/issues/{issue.id}/comments"
        for content, token in [("one", citizen_token), ("two", other_token), ("three", citizen_token)]:
            res = await client.post(url, json={"content": content}, headers=auth_header(token))
            assert res.status_code == 200

        detail = (await client.get(f"/api/issues/{issue.id}")).json()
        assert [c["content"] for c in detail["comments"]] == ["one", "two", "three"]

    async def test_citizen_cannot_post_official(self, client: AsyncClient, issue, citizen_token):
        res = await client.post(
            f"/api/issues/{issue.id}/comments",
            json={"content": "Official word", "isOfficial": True},
            headers=auth_header(citizen_token),
        )
        assert res.status_code == 403
        assert res.json()["detail"] == "Only admins and moderators can add official comments"

        detail = (await client.get(f"/api/issues/{issue.id}")).json()
        assert detail["comments"] == []

    async def test_staff_official_comment(self, client: AsyncClient, issue, moderator_token, admin_token):
        for token in (moderator_token, admin_token):
            res = await client.post(
                f"/api/issues/{issue.id}/comments",
                json={"content": "Crew scheduled for Monday", "isOfficial": True},
                headers=auth_header(token),
            )
            assert res.status_code == 200
            assert res.json()["comment"]["isOfficial"] is True

    async def test_blank_comment_rejected(self, client: AsyncClient, issue, citizen_token):
        res = await client.post(
            f"/api/issues/{issue.id}/comments", json={"content": "    "}, headers=auth_header(citizen_token)
        )
        assert res.status_code == 400
        assert res.json()["errors"][0]["field"] == "content"

    async def test_comment_too_long(self, client: AsyncClient, issue, citizen_token):
        res = await client.post(
            f"/api/issues/{issue.id}/comments", json={"content": "x" * 501}, headers=auth_header(citizen_token)
        )
        assert res.status_code == 400

    async def test_comment_requires_auth(self, client: AsyncClient, issue):
        res = await client.post(f"/api/issues/{issue.id}/comments", json={"content": "hello"})
        assert res.status_code == 401

    async def test_comment_on_private_issue_of_other(self, client: AsyncClient, db, citizen, other_token):
        private = await make_issue(db, citizen, is_public=False)
        res = await client.post(
            f"/api/issues/{private.id}/comments", json={"content": "hello"}, headers=auth_header(other_token)
        )
        assert res.status_code == 404
