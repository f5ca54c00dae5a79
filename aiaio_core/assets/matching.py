"""
Matching assets against the recognized naming conventions.

Everything here is plain string comparison over asset rows (dicts) or
`Asset` objects; nothing queries the database. Scripts fetch candidates
with `db.repository` and hand them to these functions.
"""

from __future__ import annotations

import re
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from ..domain_models import Asset

TEMPLATE_THEMES: Dict[str, Tuple[str, ...]] = {
    "lullaby": ("bedtime", "sleep", "calm", "peaceful", "gentle", "soothing", "lullaby", "night", "moon", "stars"),
    "name-video": ("educational", "learning", "name", "alphabet", "colorful", "fun", "playful"),
    "letter-hunt": ("educational", "learning", "alphabet", "letters", "colorful", "fun", "playful"),
}

PURPOSE_THEMES: Dict[str, Tuple[str, ...]] = {
    "background_music": ("music", "melody", "song", "lullaby", "calm", "peaceful"),
    "intro_audio": ("voice", "speech", "narrated", "intro", "welcome"),
    "intro_background": ("background", "scene", "setting", "intro", "welcome"),
    "slideshow_image": ("scene", "character", "setting", "story", "visual"),
    "outro_audio": ("voice", "speech", "narrated", "outro", "goodbye", "ending"),
    "outro_background": ("background", "scene", "setting", "outro", "ending"),
}

BEDTIME_KEYWORDS = ("bedtime", "sleep", "calm", "peaceful", "gentle", "soothing")

LETTER_HUNT_IMAGE_TYPES = ("titleCard", "signImage", "bookImage", "groceryImage", "endingImage")

LETTER_HUNT_AUDIO_PURPOSES = (
    "titleAudio",
    "introAudio",
    "intro2Audio",
    "signAudio",
    "bookAudio",
    "groceryAudio",
    "happyDanceAudio",
    "endingAudio",
    "backgroundMusic",
)

LETTER_HUNT_SLOTS = LETTER_HUNT_IMAGE_TYPES + LETTER_HUNT_AUDIO_PURPOSES

_SIMPLE_LETTER_THEME = re.compile(r"^Letter [A-Z]$")
_LETTER_REFERENCE = re.compile(r"letter [a-z]")


def _as_asset(asset: Any) -> Asset:
    return asset if isinstance(asset, Asset) else Asset.from_row(asset)


def _lower_tags(tags: Optional[Iterable[str]]) -> List[str]:
    return [str(t).lower() for t in (tags or [])]


def _as_list(value: Any) -> List[Any]:
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value] if value else []


# ============================================================
# Safe zones / template fit
# ============================================================

def get_asset_safe_zones(asset: Mapping[str, Any]) -> List[str]:
    """
    Collect safe zones from the column, `metadata.safe_zone` and
    `metadata.review.safe_zone`, each of which may hold a string or a list.
    Falsy values are dropped and the first occurrence order is kept.
    """
    metadata = asset.get("metadata") or {}
    review = metadata.get("review") or {}

    zones = (
        _as_list(asset.get("safe_zone"))
        + _as_list(metadata.get("safe_zone"))
        + _as_list(review.get("safe_zone"))
    )
    return list(dict.fromkeys(z for z in zones if z))


def is_asset_appropriate_for_template(asset: Mapping[str, Any], template: str) -> bool:
    metadata = asset.get("metadata") or {}
    if metadata.get("template") == template:
        return True

    themes = TEMPLATE_THEMES.get(template, ())
    asset_theme = (asset.get("theme") or "").lower()
    tags = _lower_tags(asset.get("tags"))
    metadata_tags = _lower_tags(metadata.get("tags"))

    return any(
        theme in asset_theme
        or any(theme in tag for tag in tags)
        or any(theme in tag for tag in metadata_tags)
        for theme in themes
    )


def is_asset_theme_appropriate(asset: Mapping[str, Any], purpose: str) -> bool:
    themes = PURPOSE_THEMES.get(purpose, ())
    asset_theme = (asset.get("theme") or "").lower()
    tags = _lower_tags(asset.get("tags"))
    return any(theme in asset_theme or any(theme in tag for tag in tags) for theme in themes)


def theme_relevance_score(asset: Mapping[str, Any], purpose: str, safe_zone: Optional[str] = None) -> int:
    """Score used to sort candidate assets for a template slot; higher is better."""
    score = 0
    asset_theme = (asset.get("theme") or "").lower()
    tags = _lower_tags(asset.get("tags"))
    metadata = asset.get("metadata") or {}
    review = metadata.get("review") or {}

    if purpose == "background_music" and "lullaby" in asset_theme:
        score += 10
    if purpose == "intro_audio" and "bedtime" in asset_theme:
        score += 10
    if purpose == "outro_audio" and "goodnight" in asset_theme:
        score += 10

    if safe_zone is not None:
        if asset.get("safe_zone") == safe_zone:
            score += 5
        if metadata.get("safe_zone") == safe_zone:
            score += 3
        if review.get("safe_zone") == safe_zone:
            score += 3

    for keyword in BEDTIME_KEYWORDS:
        if keyword in asset_theme:
            score += 2
        if any(keyword in tag for tag in tags):
            score += 1

    return score


# ============================================================
# Letter conventions
# ============================================================

def is_simple_letter_theme(theme: Optional[str]) -> bool:
    """`Letter A` matches, compound themes like `Letter A Alligator` do not."""
    return bool(theme and _SIMPLE_LETTER_THEME.match(theme))


def has_letter_reference(title: Optional[str]) -> bool:
    return bool(_LETTER_REFERENCE.search((title or "").lower()))


def letter_hunt_slot(asset: Asset) -> Optional[str]:
    """
    The letter-hunt slot an asset fills: `imageType` for images, the asset
    purpose for audio (including the older `template_context` spelling).
    """
    if asset.type == "image":
        return asset.image_type
    if asset.type == "audio":
        return asset.asset_purpose
    return None


def find_letter_hunt_assets(
    assets: Iterable[Any],
    letter: str,
    child_name: Optional[str] = None,
) -> Dict[str, Optional[Asset]]:
    """
    Pick, for each letter-hunt slot (five images, nine audio purposes), the
    newest approved asset for `letter`.

    Generic assets (no child name) always qualify; when `child_name` is
    given, assets made for that child qualify too and win over generic ones.
    """
    letter = letter.upper()
    wanted_child = (child_name or "").lower()
    found: Dict[str, Optional[Asset]] = {slot: None for slot in LETTER_HUNT_SLOTS}
    ranked: Dict[str, Tuple[int, str]] = {}

    for raw in assets:
        asset = _as_asset(raw)
        if asset.status != "approved" or asset.template != "letter-hunt":
            continue
        slot = letter_hunt_slot(asset)
        if slot not in found:
            continue
        if (asset.target_letter or "").upper() != letter:
            continue

        owner = (asset.child_name or "").lower()
        if owner and owner != wanted_child:
            continue

        rank = (1 if owner else 0, asset.created_at or "")
        if slot not in ranked or rank > ranked[slot]:
            ranked[slot] = rank
            found[slot] = asset

    return found


def missing_letter_hunt_slots(found: Mapping[str, Optional[Asset]]) -> List[str]:
    return [slot for slot in LETTER_HUNT_SLOTS if found.get(slot) is None]


def audit_letter_hunt_metadata(
    audio_assets: Iterable[Any],
    image_assets: Iterable[Any],
) -> Dict[str, List[Asset]]:
    """
    Find letter-hunt assets whose metadata the video pipeline cannot classify:
    audio without a purpose and images without an `imageType`.
    """
    audio = [_as_asset(a) for a in audio_assets]
    images = [_as_asset(a) for a in image_assets]
    return {
        "audio_missing_purpose": [a for a in audio if not a.asset_purpose],
        "image_missing_type": [a for a in images if not a.image_type],
    }


def purpose_status_marker(asset: Asset) -> str:
    """✅ purpose stored at top level, 🔄 only in template_context, ❌ missing."""
    if asset.metadata.get("assetPurpose"):
        return "✅"
    if asset.asset_purpose:
        return "🔄"
    return "❌"
