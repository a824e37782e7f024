"""HTTP API tests."""

from reviewgate.config import settings
from reviewgate.errors import UpstreamError
from reviewgate.services.activity_recorder import ActivityEntry, save_activity


def _pulls(seeded, number=42) -> str:
    return f"/api/projects/{seeded.project.id}/pulls/{number}"


async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


async def test_readiness_reports_connections(client, rooms, make_connection):
    rooms.join(make_connection("a"), 1, 42)

    response = await client.get("/health/ready")

    assert response.json() == {"status": "ready", "database": "connected", "connections": 1}


async def test_requires_bearer_token(client, seeded):
    response = await client.get(f"{_pulls(seeded)}/status")

    assert response.status_code == 401
    assert response.json()["detail"].startswith("Authentication error")


async def test_rejects_bad_token(client, seeded):
    response = await client.get(
        f"{_pulls(seeded)}/status", headers={"Authorization": "Bearer not-a-jwt"}
    )

    assert response.status_code == 401


async def test_unknown_project(client, seeded, auth):
    response = await client.get("/api/projects/999/pulls/1/status", headers=auth(seeded.u1))

    assert response.status_code == 404
    assert response.json() == {"message": "Project not found"}


async def test_non_member_cannot_see_project(client, seeded, auth):
    response = await client.get(f"{_pulls(seeded)}/status", headers=auth(seeded.outsider))

    assert response.status_code == 403
    assert response.json() == {"message": "You do not have access to this project"}


async def test_admin_sees_every_project(client, seeded, auth):
    response = await client.get(f"{_pulls(seeded)}/status", headers=auth(seeded.admin))

    assert response.status_code == 200
    assert response.json()["canMerge"] is False


async def test_pull_number_must_be_positive(client, seeded, auth):
    response = await client.get(f"{_pulls(seeded, 0)}/status", headers=auth(seeded.u1))

    assert response.status_code == 422


async def test_review_to_merge_flow(client, seeded, auth, fake_github, activity_recorder):
    """Two teams approve, status flips, merge goes through to GitHub."""
    response = await client.post(
        f"{_pulls(seeded)}/reviews",
        json={"teamId": seeded.team_a.id, "approved": True, "comment": "LGTM"},
        headers=auth(seeded.u1),
    )
    assert response.status_code == 200
    body = response.json()
    assert body["team"]["name"] == "Backend"
    assert body["user"]["username"] == "u1"
    assert body["pullRequestNumber"] == 42
    assert body["pullRequestId"] == 9001

    status = (await client.get(f"{_pulls(seeded)}/status", headers=auth(seeded.u1))).json()
    assert status["canMerge"] is False
    assert [t["approved"] for t in status["teamApprovals"]] == [True, False]

    response = await client.post(f"{_pulls(seeded)}/merge", headers=auth(seeded.u1))
    assert response.status_code == 403
    body = response.json()
    assert body["message"] == "Cannot merge this PR. Not all teams have approved it."
    assert body["approvalStatus"]["teamApprovals"][1]["teamName"] == "Security"
    assert fake_github.merges == []

    response = await client.post(
        f"{_pulls(seeded)}/reviews",
        json={"teamId": seeded.team_b.id, "approved": True},
        headers=auth(seeded.u3),
    )
    assert response.status_code == 200

    status = (await client.get(f"{_pulls(seeded)}/status", headers=auth(seeded.u3))).json()
    assert status["canMerge"] is True
    assert status["message"] == "All teams have approved this pull request"

    response = await client.post(
        f"{_pulls(seeded)}/merge",
        json={"mergeMethod": "squash"},
        headers=auth(seeded.u3),
    )
    assert response.status_code == 200
    assert response.json()["merged"] is True
    assert fake_github.merges[0]["merge_method"] == "squash"

    await activity_recorder.drain()


async def test_submit_for_foreign_team(client, seeded, auth):
    response = await client.post(
        f"{_pulls(seeded)}/reviews",
        json={"teamId": seeded.team_b.id, "approved": True},
        headers=auth(seeded.u1),
    )

    assert response.status_code == 403
    assert response.json() == {"message": "You must be a member of the team to submit a review"}


async def test_submit_for_missing_team(client, seeded, auth):
    response = await client.post(
        f"{_pulls(seeded)}/reviews",
        json={"teamId": 999, "approved": True},
        headers=auth(seeded.u1),
    )

    assert response.status_code == 404
    assert response.json() == {"message": "Team not found"}


async def test_submit_requires_decision(client, seeded, auth):
    response = await client.post(
        f"{_pulls(seeded)}/reviews",
        json={"teamId": seeded.team_a.id},
        headers=auth(seeded.u1),
    )

    assert response.status_code == 422


async def test_github_error_passes_through(client, seeded, auth, fake_github):
    fake_github.fetch_error = UpstreamError(404, "Not Found")

    response = await client.post(
        f"{_pulls(seeded)}/reviews",
        json={"teamId": seeded.team_a.id, "approved": True},
        headers=auth(seeded.u1),
    )

    assert response.status_code == 404
    assert response.json() == {"message": "Not Found"}


async def test_user_review(client, seeded, auth, activity_recorder):
    url = f"{_pulls(seeded)}/reviews/user"

    response = await client.get(url, headers=auth(seeded.u2))
    assert response.json() == {"exists": False, "review": None}

    await client.post(
        f"{_pulls(seeded)}/reviews",
        json={"teamId": seeded.team_a.id, "approved": False, "comment": "Not yet"},
        headers=auth(seeded.u2),
    )
    response = await client.get(url, headers=auth(seeded.u2))
    body = response.json()
    assert body["exists"] is True
    assert body["review"]["approved"] is False
    assert body["review"]["comment"] == "Not yet"

    reviews = (await client.get(f"{_pulls(seeded)}/reviews", headers=auth(seeded.u1))).json()
    assert [r["user"]["username"] for r in reviews] == ["u2"]

    await activity_recorder.drain()


async def test_comment_endpoints(client, seeded, auth, rooms, make_connection, activity_recorder):
    viewer = make_connection("viewer")
    rooms.join(viewer, seeded.project.id, 42)
    comments_url = f"{_pulls(seeded)}/comments"

    response = await client.post(
        comments_url,
        json={"content": "Rename this", "fileLocation": {"path": "app.py", "line": 3}},
        headers=auth(seeded.u1),
    )
    assert response.status_code == 201
    comment = response.json()
    assert comment["fileLocation"] == {"path": "app.py", "line": 3}
    assert viewer.events() == ["comment-added"]

    response = await client.put(
        f"/api/comments/{comment['id']}", json={"content": "Hijack"}, headers=auth(seeded.u2)
    )
    assert response.status_code == 403

    response = await client.put(
        f"/api/comments/{comment['id']}", json={"content": "Rename it"}, headers=auth(seeded.u1)
    )
    assert response.status_code == 200
    assert response.json()["isEdited"] is True

    response = await client.delete(f"/api/comments/{comment['id']}", headers=auth(seeded.u1))
    assert response.json() == {"message": "Comment deleted successfully"}
    assert viewer.events() == ["comment-added", "comment-updated", "comment-deleted"]

    listed = (await client.get(comments_url, headers=auth(seeded.u1))).json()
    assert listed == []

    response = await client.delete(f"/api/comments/{comment['id']}", headers=auth(seeded.u1))
    assert response.status_code == 404

    await activity_recorder.drain()


async def test_empty_comment_rejected(client, seeded, auth):
    response = await client.post(
        f"{_pulls(seeded)}/comments", json={"content": ""}, headers=auth(seeded.u1)
    )

    assert response.status_code == 422


async def test_activity_feed(client, seeded, auth, db_session):
    for activity_type in ("pr_comment", "pr_approval"):
        entry = ActivityEntry(
            user_id=seeded.u1.id,
            activity_type=activity_type,
            project_id=seeded.project.id,
            pull_request_number=42,
        )
        await save_activity(db_session, entry)

    response = await client.get(
        "/api/activity/user", params={"timeframe": "day", "limit": 1}, headers=auth(seeded.u1)
    )

    assert response.status_code == 200
    body = response.json()
    assert body["timeframe"] == "day"
    assert len(body["activities"]) == 1
    assert body["activities"][0]["activityType"] == "pr_approval"
    assert body["activities"][0]["user"]["username"] == "u1"


async def test_activity_feed_rejects_unknown_timeframe(client, seeded, auth):
    response = await client.get(
        "/api/activity/user", params={"timeframe": "decade"}, headers=auth(seeded.u1)
    )

    assert response.status_code == 422


async def test_comments_require_project_access(client, seeded, auth):
    response = await client.get(f"{_pulls(seeded)}/comments", headers=auth(seeded.outsider))

    assert response.status_code == 403


async def test_replies_require_project_access(client, seeded, auth, activity_recorder):
    comments_url = f"{_pulls(seeded)}/comments"
    parent = (
        await client.post(comments_url, json={"content": "Thread"}, headers=auth(seeded.u1))
    ).json()
    await client.post(
        comments_url,
        json={"content": "secret reply", "parentComment": parent["id"]},
        headers=auth(seeded.u1),
    )
    replies_url = f"/api/comments/{parent['id']}/replies"

    response = await client.get(replies_url, headers=auth(seeded.outsider))
    assert response.status_code == 403
    assert response.json() == {"message": "You do not have access to this project"}

    for reader in (seeded.u3, seeded.admin):
        response = await client.get(replies_url, headers=auth(reader))
        assert response.status_code == 200
        assert [r["content"] for r in response.json()] == ["secret reply"]

    response = await client.get("/api/comments/999/replies", headers=auth(seeded.u1))
    assert response.status_code == 404
    assert response.json() == {"message": "Comment not found"}

    await activity_recorder.drain()


async def test_team_activity_feed(client, seeded, auth, db_session, monkeypatch):
    monkeypatch.setattr(settings, "team_activity_feed_limit", 2)
    for user in (seeded.u1, seeded.u2, seeded.u3, seeded.u2):
        await save_activity(db_session, ActivityEntry(user_id=user.id, activity_type="pr_comment"))
    url = f"/api/activity/team/{seeded.team_a.id}"

    response = await client.get(url, params={"timeframe": "all"}, headers=auth(seeded.u1))
    assert response.status_code == 200
    body = response.json()
    assert body["timeframe"] == "all"
    assert [a["user"]["username"] for a in body["activities"]] == ["u2", "u2"]

    response = await client.get(url, headers=auth(seeded.u3))
    assert response.status_code == 403
    assert response.json() == {"message": "You are not a member of this team"}

    response = await client.get("/api/activity/team/999", headers=auth(seeded.u1))
    assert response.status_code == 404
    assert response.json() == {"message": "Team not found"}
