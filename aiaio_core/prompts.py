# aiaio_core/prompts.py

"""
Image-prompt instructions for the video templates, and the helpers that
turn a request context into prompts stored in the `prompts` table.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, Dict, List, Optional

from . import llm_client
from .db import repository as repo

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an expert content creator for children's educational videos. "
    "You must follow the provided instructions EXACTLY and return ONLY valid JSON."
)

PROMPT_TEMPLATES = ("lullaby", "name-video")
PROMPT_SAFE_ZONES = ("left_safe", "right_safe", "center_safe", "frame", "slideshow")
DEFAULT_ART_STYLE = "2D Pixar Style"
DEFAULT_ASPECT_RATIO = "16:9"
MAX_PROMPT_COUNT = 10

_CHILD_SAFETY = """
🧒 CHILD SAFETY REQUIREMENTS (CRITICAL)
Content must be 100% appropriate for ages 2-5 years old.
NO scary, frightening, or intense imagery whatsoever.
NO violence, conflict, or aggressive behavior (even cartoon style).
NO dark themes, shadows, or ominous elements.
NO realistic depictions of dangerous situations.
All imagery must be gentle and non-startling.
NO sudden movements, loud implications, or jarring visual themes.
"""

LULLABY_INSTRUCTIONS = (
    "You are generating prompts for preschool lullaby videos with a calming bedtime theme. "
    "Follow these rules carefully.\n"
    + _CHILD_SAFETY
    + """Characters and imagery must ALWAYS appear calm, peaceful, and friendly.
Colors must be soft, warm, and inviting (avoid dark, overly saturated, or harsh tones).
Themes must be interpreted in the most innocent, cozy, sleepy way possible.

🎨 IMAGE REQUIREMENTS
May include more than one character or object, but keep compositions simple, uncluttered, and clear.
Calm, bedtime poses or states: lying down asleep, curled up peacefully, eyes closed in calm rest,
sitting sleepily with a blanket or pillow.
Light, soft solid color backgrounds only. No gradients, patterns, detailed scenery, or environmental complexity.
Bedtime props are allowed if calming and simple (blanket, pillow, teddy bear, moon, stars).
No text or letters included in the image itself.

🛌 BEDTIME THEME REQUIREMENTS
Characters or items are asleep, resting, or in quiet bedtime preparation.
Objects like the moon, stars or sun have closed eyes and peaceful expressions.
Animals are curled up or lying down calmly. Human-like characters wear pajamas or are tucked into bed.

🖼️ SAFE ZONE REQUIREMENTS
FRAME (intro/outro): The image is a decorative frame around the edges, leaving the center area
completely empty for a title or ending text added later. Nothing enters or overlaps the center.
SLIDESHOW: A simple, calm bedtime scene filling the entire frame, uncluttered and soothing. No text.

📝 GENERAL PROMPT STRUCTURE
Each prompt states the art style, describes the characters or objects (type, colors, calm expression,
pose), gives the placement instructions for its safe zone, describes the single light solid color
background, and ends with negative instructions excluding complex backgrounds, busy scenes, text,
dramatic poses, or frightening elements."""
)

NAME_VIDEO_INSTRUCTIONS = (
    "You are generating prompts for preschool educational videos. Follow these rules carefully.\n"
    + _CHILD_SAFETY
    + """Characters must ALWAYS appear happy, calm, and friendly.
Colors must be bright, warm, and inviting (avoid dark or muted tones).
Themes must be interpreted in the most innocent, playful way possible.

🎨 IMAGE REQUIREMENTS
SINGLE character or object only (no groups, pairs, or busy scenes).
Simple, clear pose (sitting, standing, smiling calmly).
Light, solid color background only, so black text stays readable.
No gradients, patterns, textures, scenery, props, or decorations unless explicitly requested.
No text or letters included in the image itself.

🖼️ SAFE ZONE REQUIREMENTS
LEFT_SAFE: Character entirely on the RIGHT side, left 40% completely empty for text overlay.
RIGHT_SAFE: Character entirely on the LEFT side, right 40% completely empty for text overlay.
CENTER_SAFE: A decorative frame around the edges, center area completely empty for text overlay.

📝 GENERAL PROMPT STRUCTURE
Each prompt states the art style, describes the single character or object (type, colors, happy
expression, simple pose), gives the placement instructions for its safe zone, describes the single
light solid color background, and ends with negative instructions excluding extra elements, props,
scenery, text, multiple characters, or dynamic poses."""
)


@dataclass
class PromptContext:
    theme: str
    age_range: str
    template: str
    child_name: Optional[str] = None
    personalization: str = "general"
    safe_zone: Optional[str] = None
    aspect_ratio: Optional[str] = None
    art_style: Optional[str] = None
    prompt_count: int = 3
    additional_context: Optional[str] = None


def default_safe_zone(template: str) -> str:
    return "slideshow" if template == "lullaby" else "center_safe"


def instructions_for(template: str) -> str:
    return LULLABY_INSTRUCTIONS if template == "lullaby" else NAME_VIDEO_INSTRUCTIONS


def build_user_prompt(context: PromptContext, safe_zone: str) -> str:
    if context.personalization == "personalized" and context.child_name:
        personalization = f"This content is personalized for a child named {context.child_name}."
    else:
        personalization = "This is general content for children."

    lines = [
        instructions_for(context.template),
        "",
        "CONTEXT:",
        f"Theme: {context.theme}",
        f"Age Range: {context.age_range}",
        f"Template: {context.template}",
        f"Safe Zone: {safe_zone}",
    ]
    if context.aspect_ratio:
        lines.append(f"Aspect Ratio: {context.aspect_ratio}")
    if context.art_style:
        lines.append(f"Art Style: {context.art_style}")
    lines.append(personalization)
    if context.additional_context:
        lines.append(f"Additional context: {context.additional_context}")

    lines += [
        "",
        "TASK:",
        f"Generate {context.prompt_count} image prompts for a {context.theme} video "
        f"targeting {context.age_range} year olds.",
        "",
        "Return a JSON object with the following structure:",
        '{"images": ["Complete detailed prompt for image 1", "..."]}',
        "",
        "IMPORTANT:",
        "- Each prompt must follow the exact format and safety requirements above",
        "- Include the safe zone placement instructions in each image prompt",
        "- Return ONLY the JSON object, no additional text",
    ]
    return "\n".join(lines)


def generate_prompts(context: PromptContext, client=None) -> Dict[str, Any]:
    """
    Ask the text model for image prompts.

    Returns `{"images": [...], "metadata": {...}}`.
    """
    safe_zone = context.safe_zone or default_safe_zone(context.template)
    data = llm_client.complete_json(
        SYSTEM_PROMPT,
        build_user_prompt(context, safe_zone),
        client=client,
    )

    images = [str(p) for p in data.get("images") or []]
    return {
        "images": images,
        "metadata": {
            "template": context.template,
            "safeZone": safe_zone,
            "theme": context.theme,
            "ageRange": context.age_range,
            "aspectRatio": context.aspect_ratio or DEFAULT_ASPECT_RATIO,
            "artStyle": context.art_style or DEFAULT_ART_STYLE,
            "generatedAt": datetime.now(UTC).isoformat(),
        },
    }


def save_prompts(client, generated_by_zone: Dict[str, Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Store each generated image prompt as a pending row of `prompts`."""
    rows = []
    for safe_zone, generated in generated_by_zone.items():
        metadata = generated.get("metadata") or {}
        for prompt in generated.get("images") or []:
            rows.append(
                {
                    "asset_type": "image",
                    "theme": metadata.get("theme"),
                    "style": metadata.get("artStyle") or DEFAULT_ART_STYLE,
                    "safe_zone": safe_zone,
                    "prompt_text": prompt,
                    "status": "pending",
                }
            )

    saved = repo.insert_prompts(client, rows)
    logger.info("Saved %d prompts", len(saved))
    return saved
