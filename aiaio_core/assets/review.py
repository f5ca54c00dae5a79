"""
Approving and rejecting generated assets.

Approval follows the manual procedure the team used from scripts:
read the current row, patch it, then read it again to confirm the new
status actually landed (row level security can silently drop updates made
with the wrong key).
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Dict, Iterable, List, Optional

from ..db import repository as repo
from ..errors import AdminError, ValidationFailed
from .constants import ASSET_STATUSES

logger = logging.getLogger(__name__)


def _merge_review(metadata: Optional[Dict[str, Any]], **review_fields: Any) -> Dict[str, Any]:
    merged = dict(metadata or {})
    review = dict(merged.get("review") or {})
    review.update({k: v for k, v in review_fields.items() if v is not None})
    merged["review"] = review
    return merged


def approve_asset(
    client,
    asset_id: str,
    reviewer: Optional[str] = None,
    safe_zones: Optional[List[str]] = None,
    notes: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Mark an asset as approved and return the re-read row.

    Raises
    ------
    RecordNotFound
        If the asset does not exist.
    AdminError
        If the re-read row does not show the approved status.
    """
    current = repo.get_asset(client, asset_id)
    logger.info("Approving asset %s (was %s)", asset_id, current.get("status"))

    now = repo.utc_now_iso()
    fields: Dict[str, Any] = {
        "status": "approved",
        "approved_at": now,
        "metadata": _merge_review(
            current.get("metadata"),
            safe_zone=safe_zones,
            approval_notes=notes,
            reviewed_at=now,
            reviewed_by=reviewer,
        ),
    }
    if reviewer:
        fields["approved_by"] = reviewer
    if notes:
        fields["approval_notes"] = notes

    repo.update_asset(client, asset_id, fields)

    verified = repo.get_asset(client, asset_id)
    if verified.get("status") != "approved":
        raise AdminError(
            f"Asset {asset_id} still has status {verified.get('status')!r} after approval"
        )
    return verified


def reject_asset(
    client,
    asset_id: str,
    reason: str,
    reviewer: Optional[str] = None,
) -> Dict[str, Any]:
    if not reason or not reason.strip():
        raise ValidationFailed("A rejection reason is required")

    current = repo.get_asset(client, asset_id)
    now = repo.utc_now_iso()
    logger.info("Rejecting asset %s: %s", asset_id, reason)

    return repo.update_asset(
        client,
        asset_id,
        {
            "status": "rejected",
            "rejection_reason": reason,
            "metadata": _merge_review(
                current.get("metadata"),
                rejection_reason=reason,
                reviewed_at=now,
                reviewed_by=reviewer,
            ),
        },
    )


def list_pending_assets(client, asset_type: Optional[str] = None, limit: int = 10) -> List[Dict[str, Any]]:
    return repo.list_assets(client, status="pending", asset_type=asset_type, limit=limit)


def group_by_status(rows: Iterable[Dict[str, Any]]) -> Dict[str, List[Dict[str, Any]]]:
    groups: Dict[str, List[Dict[str, Any]]] = defaultdict(list)
    for row in rows:
        groups[row.get("status") or "unknown"].append(row)
    return dict(groups)


def asset_stats(rows: Iterable[Dict[str, Any]]) -> Dict[str, int]:
    rows = list(rows)
    groups = group_by_status(rows)
    stats = {"total": len(rows)}
    for status in ASSET_STATUSES:
        stats[status] = len(groups.get(status, []))
    return stats
