"""
aiaio_core.assets.maintenance
=============================

One-shot metadata patches over the `assets` table.

Each patch:
- selects the affected rows with a narrow query,
- computes the new values in Python,
- writes row by row (a failing row is logged and counted, the rest continue),
- returns a `PatchReport`.

With `dry_run=True` nothing is written; the report lists what would change.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List

from ..db import repository as repo
from ..errors import AdminError
from .matching import is_simple_letter_theme

logger = logging.getLogger(__name__)


@dataclass
class PatchReport:
    updated: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    dry_run: bool = False

    @property
    def total(self) -> int:
        return len(self.updated) + len(self.failed) + len(self.skipped)


def _apply(client, report: PatchReport, asset_id: str, fields: Dict[str, Any]) -> None:
    if report.dry_run:
        report.updated.append(asset_id)
        return
    try:
        repo.update_asset(client, asset_id, fields)
    except AdminError as e:
        logger.error("Failed to update asset %s: %s", asset_id, e)
        report.failed.append(asset_id)
        return
    report.updated.append(asset_id)


def fix_letter_audio_extensions(client, dry_run: bool = False) -> PatchReport:
    """
    Point approved letter audio at the `.mp3` files that were actually
    uploaded; older rows were saved with a `.wav` URL.
    """
    report = PatchReport(dry_run=dry_run)
    rows = repo.list_assets(
        client,
        status="approved",
        asset_type="audio",
        audio_class="letter_audio",
        file_url_like="%.wav",
    )
    logger.info("Found %d letter audio assets with .wav URLs", len(rows))

    for row in rows:
        metadata = dict(row.get("metadata") or {})
        file_url = row.get("file_url")
        if not file_url or not metadata.get("letter"):
            report.skipped.append(row["id"])
            continue

        metadata.update(
            {
                "extension_fixed": True,
                "fixed_date": repo.utc_now_iso(),
                "original_wav_url": file_url,
            }
        )
        fields = {"file_url": file_url.replace(".wav", ".mp3", 1), "metadata": metadata}
        _apply(client, report, row["id"], fields)

    return report


def tag_ending_videos(client, dry_run: bool = False) -> PatchReport:
    """Mark `Letter X` videos as ending videos for the letter-hunt template."""
    report = PatchReport(dry_run=dry_run)
    rows = repo.list_assets(client, asset_type="video", theme_like="Letter %")

    for row in rows:
        if not is_simple_letter_theme(row.get("theme")):
            report.skipped.append(row["id"])
            continue

        tags = list(row.get("tags") or [])
        metadata = dict(row.get("metadata") or {})
        if "ending" in tags and metadata.get("videoType") == "endingVideo":
            report.skipped.append(row["id"])
            continue

        if "ending" not in tags:
            tags.append("ending")
        metadata["videoType"] = "endingVideo"
        _apply(client, report, row["id"], {"tags": tags, "metadata": metadata})

    return report


def backfill_asset_purpose(client, template: str, dry_run: bool = False) -> PatchReport:
    report = PatchReport(dry_run=dry_run)
    rows = repo.list_assets(client, template=template)

    for row in rows:
        metadata = dict(row.get("metadata") or {})
        context = metadata.get("template_context") or {}
        purpose = context.get("asset_purpose")
        if metadata.get("assetPurpose") or not purpose:
            report.skipped.append(row["id"])
            continue

        metadata["assetPurpose"] = purpose
        _apply(client, report, row["id"], {"metadata": metadata})

    return report
