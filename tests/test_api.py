"""HTTP routes, with the database and S3 replaced through dependency overrides."""

import boto3
import jwt
import pytest
from botocore.stub import ANY, Stubber
from fastapi.testclient import TestClient

from aiaio_core.config import get_settings
from api import dependencies
from api.main import app
from conftest import make_asset, make_video

ADMIN_ID = "admin-1"
PARENT_ID = "parent-1"


def bearer(user_id):
    token = jwt.encode({"sub": user_id}, "not-checked", algorithm="HS256")
    return {"Authorization": f"Bearer {token}"}


ADMIN = bearer(ADMIN_ID)
PARENT = bearer(PARENT_ID)


@pytest.fixture
def s3():
    return boto3.client("s3", region_name="us-east-1")


@pytest.fixture
def client(db, s3):
    db.tables = {
        "users": [
            {"id": ADMIN_ID, "email": "admin@example.com", "role": "admin"},
            {"id": PARENT_ID, "email": "parent@example.com", "role": "parent"},
        ]
    }
    app.dependency_overrides[dependencies.get_supabase] = lambda: db
    app.dependency_overrides[dependencies.get_s3] = lambda: s3
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    assert client.get("/").json()["status"] == "ok"
    assert client.get("/health").json()["service"] == "aiaio-admin-api"


@pytest.mark.parametrize(
    "headers, status",
    [
        ({}, 401),
        ({"Authorization": "Token abc"}, 401),
        ({"Authorization": "Bearer not-a-jwt"}, 401),
        (PARENT, 403),
        (ADMIN, 200),
    ],
)
def test_admin_routes_require_admin_role(client, headers, status):
    assert client.get("/api/assets/stats", headers=headers).status_code == status


def test_token_without_subject(client):
    token = jwt.encode({"role": "admin"}, "x", algorithm="HS256")
    response = client.get("/api/assets/stats", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_list_assets_filters_and_paginates(client, db):
    db.tables["assets"] = [make_asset(f"a{i}", created_at=f"2024-01-{i + 1:02d}") for i in range(55)]
    db.tables["assets"].append(make_asset("approved", status="approved", created_at="2025-01-01"))

    page1 = client.get("/api/assets", params={"status": "pending"}, headers=ADMIN).json()
    page2 = client.get("/api/assets", params={"status": "pending", "page": 2}, headers=ADMIN).json()

    assert page1["per_page"] == 50
    assert len(page1["assets"]) == 50
    assert page1["assets"][0]["id"] == "a54"
    assert len(page2["assets"]) == 5


def test_asset_stats(client, db):
    db.tables["assets"] = [make_asset("a1"), make_asset("a2", status="rejected")]
    assert client.get("/api/assets/stats", headers=ADMIN).json() == {
        "total": 2,
        "pending": 1,
        "approved": 0,
        "rejected": 1,
    }


def test_validate_form(client):
    response = client.post("/api/assets/validate", json={"kind": "review", "form": {"safe_zone": []}})
    body = response.json()
    assert response.status_code == 200
    assert body["is_valid"] is False
    assert body["errors"][0]["field"] == "safe_zone"


def test_validate_form_reports_non_numeric_volume(client):
    response = client.post(
        "/api/assets/validate",
        json={"kind": "upload", "form": {"theme": "Bedtime", "type": "image", "volume": "loud"}},
    )
    assert response.status_code == 200
    assert response.json()["is_valid"] is False
    assert [e["field"] for e in response.json()["errors"]] == ["volume"]


def test_approve_asset(client, db):
    db.tables["assets"] = [make_asset("a1")]

    bad = client.post("/api/assets/a1/approve", json={"safe_zones": ["sideways"]}, headers=ADMIN)
    assert bad.status_code == 400
    assert db.row("assets", "a1")["status"] == "pending"

    ok = client.post("/api/assets/a1/approve", json={"safe_zones": ["left_safe"], "notes": "ok"}, headers=ADMIN)
    assert ok.status_code == 200
    assert ok.json()["asset"]["status"] == "approved"
    assert db.row("assets", "a1")["approved_by"] == "admin@example.com"


def test_approve_unknown_asset(client):
    response = client.post("/api/assets/nope/approve", json={"safe_zones": ["left_safe"]}, headers=ADMIN)
    assert response.status_code == 404


def test_reject_asset(client, db):
    db.tables["assets"] = [make_asset("a1")]
    assert client.post("/api/assets/a1/reject", json={"reason": ""}, headers=ADMIN).status_code == 422
    assert client.post("/api/assets/a1/reject", json={"reason": "   "}, headers=ADMIN).status_code == 400

    response = client.post("/api/assets/a1/reject", json={"reason": "Blurry"}, headers=ADMIN)
    assert response.status_code == 200
    assert db.row("assets", "a1")["rejection_reason"] == "Blurry"


def test_check_child_assets(client, db):
    db.tables["assets"] = [
        make_asset(
            "t1",
            status="approved",
            metadata={"template": "letter-hunt", "targetLetter": "A", "imageType": "titleCard"},
        )
    ]
    body = client.get("/api/assets/check-child-assets", params={"letter": "a"}, headers=ADMIN).json()
    assert body["letter"] == "A"
    assert body["slots"]["titleCard"]["id"] == "t1"
    assert "signImage" in body["missing"]
    assert "backgroundMusic" in body["missing"]


def test_webhook(client, db):
    db.tables["video_generation_jobs"] = [{"id": "job-1", "lambda_request_id": "r1", "status": "rendering"}]

    assert client.post("/api/videos/webhook", json={}).status_code == 400
    assert client.post("/api/videos/webhook", json={"renderId": "other"}).status_code == 404

    response = client.post("/api/videos/webhook", json={"renderId": "r1", "outputFile": "https://x/out.mp4"})
    assert response.json() == {"success": True, "job_id": "job-1", "status": "completed"}


def test_job_status(client, db):
    db.tables["video_generation_jobs"] = [
        {"id": "job-1", "lambda_request_id": "r1", "status": "completed", "completed_at": "2024-05-01T10:02:00+00:00"}
    ]

    assert client.get("/api/videos/status/r1").status_code == 401
    assert client.get("/api/videos/status/other", headers=ADMIN).status_code == 404

    body = client.get("/api/videos/status/r1", headers=ADMIN).json()
    assert body["success"] is True
    assert body["status"] == "completed"
    assert body["timestamps"]["completed_at"] == "2024-05-01T10:02:00+00:00"


def test_approve_video(client, db, s3):
    render_url = "https://remotionlambda-test.s3.amazonaws.com/renders/r1/out.mp4"
    db.tables["child_approved_videos"] = [make_video("v1", video_url=render_url, child_name="Ava")]

    with Stubber(s3) as stubber:
        stubber.add_response("copy_object", {"CopyObjectResult": {}}, {
            "CopySource": "remotionlambda-test/renders/r1/out.mp4",
            "Bucket": "test-public-videos",
            "Key": ANY,
            "MetadataDirective": "REPLACE",
            "Metadata": ANY,
        })
        response = client.post("/api/videos/v1/approve", headers=ADMIN)

    assert response.status_code == 200
    assert response.json()["new_url"] == db.row("child_approved_videos", "v1")["video_url"]


def test_storage_listing_uses_public_bucket(client, s3):
    with Stubber(s3) as stubber:
        stubber.add_response(
            "list_objects_v2",
            {"CommonPrefixes": [{"Prefix": "approved-videos/"}]},
            {"Bucket": "test-public-videos", "Prefix": "", "Delimiter": "/", "MaxKeys": 1000},
        )
        body = client.get("/api/s3/list", headers=ADMIN).json()

    assert body["folders"] == ["approved-videos/"]
    assert body["objects"] == []


def test_missing_videos(client, db):
    db.tables["children"] = [{"id": "c1", "name": "Ava"}]
    db.tables["child_approved_videos"] = []

    body = client.get("/api/admin/missing-videos", params={"templateType": "all", "daysThreshold": 10}, headers=ADMIN).json()

    assert body["success"] is True
    assert body["daysThreshold"] == 10
    assert body["stats"]["totalWithNoVideos"] == 1


def test_misassigned_videos(client, db):
    db.tables["video_assignments"] = [
        {
            "id": "as1",
            "video_id": "v1",
            "child_id": None,
            "assignment_type": "general",
            "status": "published",
            "child_approved_videos": {"video_title": "Letter A for Ava", "child_name": "Ava", "template_data": {}},
        }
    ]
    body = client.get("/api/admin/misassigned-videos", headers=ADMIN).json()
    assert body["count"] == 1
    assert body["videos"][0]["assignment_id"] == "as1"


def test_refresh_playlists(client, db):
    db.tables["children"] = [{"id": "c1", "name": "Ava"}]
    db.tables["child_approved_videos"] = [
        make_video("v1", [{"id": "as1", "child_id": None, "status": "published", "publish_date": "2024-01-01"}])
    ]
    body = client.post("/api/admin/playlists/refresh", headers=ADMIN).json()
    assert body == {"updated": 1, "playlists": {"c1": 1}}


def test_dashboard_videos(client, db, monkeypatch):
    monkeypatch.setenv("CLOUDFRONT_DISTRIBUTION_DOMAIN", "d1.cloudfront.net")
    get_settings.cache_clear()
    db.tables["children"] = [{"id": "c1", "name": "Ava", "parent_id": PARENT_ID}]
    db.tables["child_approved_videos"] = [
        make_video("v1", [{"id": "as1", "child_id": "c1", "status": "published", "publish_date": "2024-01-01"}])
    ]

    response = client.get("/api/dashboard/videos", params={"child_id": "c1"}, headers=PARENT)

    assert response.status_code == 200
    (video,) = response.json()["videos"]
    assert video["video_url"] == "https://d1.cloudfront.net/approved-videos/v1.mp4"


def test_dashboard_rejects_other_parents(client, db):
    db.tables["children"] = [{"id": "c1", "name": "Ava", "parent_id": "someone-else"}]
    response = client.get("/api/dashboard/videos", params={"child_id": "c1"}, headers=PARENT)
    assert response.status_code == 403


def test_generate_prompts(client, db, monkeypatch):
    calls = []

    def fake_complete_json(system, user, **kwargs):
        calls.append(user)
        return {"images": ["prompt one"]}

    monkeypatch.setattr("aiaio_core.prompts.llm_client.complete_json", fake_complete_json)

    response = client.post(
        "/api/prompts/generate",
        json={
            "theme": "Ocean",
            "ageRange": "2-4",
            "template": "name-video",
            "safeZones": ["left_safe", "bogus", "right_safe"],
            "promptCount": 50,
            "artStyle": "Other",
            "customArtStyle": "Crayon",
        },
        headers=ADMIN,
    )

    assert response.status_code == 200
    body = response.json()
    assert set(body["prompts"]) == {"left_safe", "right_safe"}
    assert body["saved"] == 2
    assert body["prompts"]["left_safe"]["metadata"]["artStyle"] == "Crayon"
    assert "Generate 10 image prompts" in calls[0]
    assert len(db.rows("prompts")) == 2


def test_generate_prompts_validation(client):
    payload = {"theme": "Ocean", "ageRange": "2-4", "template": "letter-hunt"}
    assert client.post("/api/prompts/generate", json=payload, headers=ADMIN).status_code == 400

    payload.update(template="lullaby", safeZones=["nowhere"])
    assert client.post("/api/prompts/generate", json=payload, headers=ADMIN).status_code == 400
