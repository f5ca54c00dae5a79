import pytest

from aiaio_core.errors import RecordNotFound
from aiaio_core.videos.render_jobs import apply_render_result, get_job_status


@pytest.fixture
def jobs(db):
    db.tables = {"video_generation_jobs": [{"id": "job-1", "lambda_request_id": "render-1", "status": "rendering"}]}
    return db


def test_output_file_completes_job(jobs):
    result = apply_render_result(jobs, "render-1", output_file="https://bucket/renders/render-1/out.mp4")

    assert result == {"job_id": "job-1", "status": "completed"}
    job = jobs.row("video_generation_jobs", "job-1")
    assert job["output_url"] == "https://bucket/renders/render-1/out.mp4"
    assert job["completed_at"]


def test_error_wins_over_output(jobs):
    result = apply_render_result(jobs, "render-1", output_file="https://x/out.mp4", error="Lambda timeout")

    assert result["status"] == "failed"
    job = jobs.row("video_generation_jobs", "job-1")
    assert job["error_message"] == "Lambda timeout"
    assert "output_url" not in job


def test_empty_callback_leaves_job_alone(jobs):
    assert apply_render_result(jobs, "render-1") == {"job_id": "job-1", "status": "rendering"}
    assert not [call for call in jobs.calls if call[1] == "update"]


def test_unknown_render(jobs):
    with pytest.raises(RecordNotFound):
        apply_render_result(jobs, "render-404", output_file="x")


def test_job_status_by_render_id(jobs):
    jobs.tables["video_generation_jobs"][0].update(
        {"created_at": "2024-05-01T10:00:00+00:00", "submitted_at": "2024-05-01T10:00:05+00:00"}
    )

    status = get_job_status(jobs, "render-1")

    assert status["job_id"] == "job-1"
    assert status["status"] == "rendering"
    assert status["timestamps"]["submitted_at"] == "2024-05-01T10:00:05+00:00"
    assert status["timestamps"]["completed_at"] is None


def test_job_status_defaults_to_most_recent(jobs):
    jobs.tables["video_generation_jobs"] = [
        {"id": "old", "status": "completed", "created_at": "2024-01-01T00:00:00+00:00"},
        {"id": "new", "status": "failed", "created_at": "2024-03-01T00:00:00+00:00", "error_message": "boom"},
    ]

    status = get_job_status(jobs)

    assert status["job_id"] == "new"
    assert status["error_message"] == "boom"


def test_job_status_without_jobs(db):
    with pytest.raises(RecordNotFound):
        get_job_status(db)
    with pytest.raises(RecordNotFound):
        get_job_status(db, "render-404")
