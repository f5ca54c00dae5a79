"""Applying render-service callbacks to `video_generation_jobs`."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from ..db import repository as repo

logger = logging.getLogger(__name__)


def apply_render_result(
    client,
    render_id: str,
    output_file: Optional[str] = None,
    error: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Record the outcome of a render on its job.

    An error wins over an output file. A callback carrying neither leaves the
    job untouched.

    Raises
    ------
    RecordNotFound
        If no job has `lambda_request_id == render_id`.
    """
    job = repo.find_job_by_render_id(client, render_id)
    now = repo.utc_now_iso()

    if error:
        repo.update_job(
            client,
            job["id"],
            {"status": "failed", "error_message": error, "failed_at": now},
        )
        logger.info("Job %s failed: %s", job["id"], error)
        status = "failed"
    elif output_file:
        repo.update_job(
            client,
            job["id"],
            {"status": "completed", "output_url": output_file, "completed_at": now},
        )
        logger.info("Job %s completed with output %s", job["id"], output_file)
        status = "completed"
    else:
        logger.warning("Job %s callback received without outputFile or error", job["id"])
        status = job.get("status")

    return {"job_id": job["id"], "status": status}


JOB_TIMESTAMPS = ("created_at", "submitted_at", "started_at", "completed_at", "failed_at")


def get_job_status(client, render_id: Optional[str] = None) -> Dict[str, Any]:
    """
    Status of the job for `render_id`, or of the most recent job when no id
    is given. Timestamps the job never reached are None.

    Raises
    ------
    RecordNotFound
        If there is no matching job.
    """
    if render_id:
        job = repo.find_job_by_render_id(client, render_id)
    else:
        job = repo.latest_job(client)

    return {
        "job_id": job["id"],
        "render_id": job.get("lambda_request_id"),
        "status": job.get("status"),
        "output_url": job.get("output_url"),
        "error_message": job.get("error_message"),
        "timestamps": {name: job.get(name) for name in JOB_TIMESTAMPS},
    }
