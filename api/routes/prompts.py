"""
- POST /api/prompts/generate: image prompts for each requested safe zone
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from aiaio_core.errors import AdminError
from aiaio_core.prompts import (
    MAX_PROMPT_COUNT,
    PROMPT_SAFE_ZONES,
    PROMPT_TEMPLATES,
    PromptContext,
    generate_prompts,
    save_prompts,
)

from ..dependencies import get_supabase, http_error, require_admin
from ..models.requests import GeneratePromptsRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/prompts", tags=["prompts"])


@router.post("/generate")
async def generate(
    request: GeneratePromptsRequest,
    client=Depends(get_supabase),
    admin: dict = Depends(require_admin),
):
    if request.template not in PROMPT_TEMPLATES:
        raise HTTPException(
            status_code=400,
            detail='Invalid template. Must be "lullaby" or "name-video"',
        )

    safe_zones = [z for z in request.safeZones if z in PROMPT_SAFE_ZONES]
    if not safe_zones:
        raise HTTPException(status_code=400, detail="At least one valid safe zone must be selected.")

    aspect_ratio = request.aspectRatio if request.aspectRatio in ("16:9", "9:16") else "16:9"
    art_style = request.customArtStyle if request.artStyle == "Other" else request.artStyle
    count = max(1, min(MAX_PROMPT_COUNT, request.promptCount))

    all_prompts = {}
    try:
        for safe_zone in safe_zones:
            context = PromptContext(
                theme=request.theme,
                age_range=request.ageRange,
                template=request.template,
                child_name=request.childName,
                personalization=request.personalization,
                safe_zone=safe_zone,
                aspect_ratio=aspect_ratio,
                art_style=art_style,
                prompt_count=count,
                additional_context=request.additionalContext,
            )
            all_prompts[safe_zone] = generate_prompts(context)

        saved = save_prompts(client, all_prompts) if request.save else []
    except AdminError as e:
        raise http_error(e) from e

    return {"success": True, "prompts": all_prompts, "saved": len(saved)}
