"""
Asset review endpoints.

- GET  /api/assets: list assets (filters, 50 per page)
- GET  /api/assets/stats: counts by status
- GET  /api/assets/check-child-assets: letter-hunt image slots for a letter
- POST /api/assets/validate: validate an asset form
- POST /api/assets/{asset_id}/approve
- POST /api/assets/{asset_id}/reject
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from aiaio_core.assets import matching, review, validation
from aiaio_core.assets.constants import ASSETS_PER_PAGE
from aiaio_core.db import repository as repo
from aiaio_core.errors import AdminError

from ..dependencies import get_supabase, http_error, require_admin
from ..models.requests import ApproveAssetRequest, FormKind, RejectAssetRequest, ValidateFormRequest

router = APIRouter(prefix="/api/assets", tags=["assets"])


def _result_body(result) -> Dict[str, Any]:
    return {
        "is_valid": result.is_valid,
        "errors": [{"field": e.field, "message": e.message} for e in result.errors],
        "message": validation.format_validation_errors(result.errors),
    }


@router.get("")
async def list_assets(
    status: Optional[str] = None,
    asset_type: Optional[str] = Query(None, alias="type"),
    template: Optional[str] = None,
    child_name: Optional[str] = None,
    page: int = Query(1, ge=1),
    client=Depends(get_supabase),
    admin: dict = Depends(require_admin),
):
    try:
        rows = repo.list_assets(
            client,
            status=status,
            asset_type=asset_type,
            template=template,
            child_name=child_name,
            limit=ASSETS_PER_PAGE,
            offset=(page - 1) * ASSETS_PER_PAGE,
        )
    except AdminError as e:
        raise http_error(e) from e
    return {"assets": rows, "page": page, "per_page": ASSETS_PER_PAGE}


@router.get("/stats")
async def asset_stats(
    template: Optional[str] = None,
    asset_type: Optional[str] = Query(None, alias="type"),
    client=Depends(get_supabase),
    admin: dict = Depends(require_admin),
):
    try:
        rows = repo.list_assets(client, template=template, asset_type=asset_type)
    except AdminError as e:
        raise http_error(e) from e
    return review.asset_stats(rows)


@router.get("/check-child-assets")
async def check_child_assets(
    letter: str = Query(..., min_length=1, max_length=1),
    child_name: Optional[str] = None,
    client=Depends(get_supabase),
    admin: dict = Depends(require_admin),
):
    try:
        rows = repo.list_assets(client, status="approved", template="letter-hunt")
    except AdminError as e:
        raise http_error(e) from e

    found = matching.find_letter_hunt_assets(rows, letter, child_name=child_name)
    return {
        "letter": letter.upper(),
        "child_name": child_name,
        "slots": {
            slot: (
                {"id": a.id, "file_url": a.file_url, "child_name": a.child_name}
                if a is not None
                else None
            )
            for slot, a in found.items()
        },
        "missing": matching.missing_letter_hunt_slots(found),
    }


@router.post("/validate")
async def validate_form(request: ValidateFormRequest):
    if request.kind == FormKind.UPLOAD:
        result = validation.validate_upload_form(
            request.form, request.file_name, request.file_size, request.content_type
        )
    elif request.kind == FormKind.EDIT:
        result = validation.validate_edit_form(request.form)
    elif request.kind == FormKind.REVIEW:
        result = validation.validate_review_form(request.form)
    else:
        result = validation.validate_bulk_upload_form(request.form, request.files)
    return _result_body(result)


@router.post("/{asset_id}/approve")
async def approve_asset(
    asset_id: str,
    request: ApproveAssetRequest,
    client=Depends(get_supabase),
    admin: dict = Depends(require_admin),
):
    result = validation.validate_review_form(
        {"safe_zone": request.safe_zones, "approval_notes": request.notes}
    )
    if not result.is_valid:
        raise HTTPException(status_code=400, detail=_result_body(result))

    try:
        row = review.approve_asset(
            client,
            asset_id,
            reviewer=admin.get("email") or admin.get("id"),
            safe_zones=request.safe_zones,
            notes=request.notes,
        )
    except AdminError as e:
        raise http_error(e) from e
    return {"success": True, "asset": row}


@router.post("/{asset_id}/reject")
async def reject_asset(
    asset_id: str,
    request: RejectAssetRequest,
    client=Depends(get_supabase),
    admin: dict = Depends(require_admin),
):
    try:
        row = review.reject_asset(
            client,
            asset_id,
            request.reason,
            reviewer=admin.get("email") or admin.get("id"),
        )
    except AdminError as e:
        raise http_error(e) from e
    return {"success": True, "asset": row}
