from __future__ import annotations

"""
aiaio_core.domain_models
========================

Domain dataclasses used across the admin tooling.

These are thin, read-only views over rows of the external schema:
- `Asset` (generated image/audio/video files and their JSON metadata)
- `Child` (child profiles)
- `ApprovedVideo` and `VideoAssignment` (reviewed renders and who sees them)
- `PlaylistEntry` (what gets written to `child_playlists.videos`)
- `ValidationError` / `ValidationResult` (form validation output)

Design notes
------------
- No I/O here: this module never talks to Supabase or S3.
- `from_row()` tolerates missing keys; the schema is owned elsewhere and
  older rows often lack newer columns.
- The original row is kept in `raw` so that scripts can print fields this
  module does not model.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional


# ============================================================
# Assets
# ============================================================

@dataclass
class Asset:
    """
    A generated media file record.

    Metadata conventions drifted over time, so the accessors below read the
    current key first and fall back to older spellings:
    - purpose: `assetPurpose`, then `template_context.asset_purpose`
    - class: `audio_class`, then `asset_class`
    """

    id: str
    type: str
    status: str
    theme: str = ""
    title: Optional[str] = None
    file_url: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    created_at: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Asset":
        return cls(
            id=row["id"],
            type=row.get("type") or "",
            status=row.get("status") or "",
            theme=row.get("theme") or "",
            title=row.get("title"),
            file_url=row.get("file_url"),
            tags=list(row.get("tags") or []),
            created_at=row.get("created_at"),
            metadata=dict(row.get("metadata") or {}),
            raw=row,
        )

    @property
    def template(self) -> Optional[str]:
        return self.metadata.get("template")

    @property
    def child_name(self) -> Optional[str]:
        return self.metadata.get("child_name") or None

    @property
    def target_letter(self) -> Optional[str]:
        return self.metadata.get("targetLetter") or self.metadata.get("letter")

    @property
    def image_type(self) -> Optional[str]:
        return self.metadata.get("imageType")

    @property
    def asset_purpose(self) -> Optional[str]:
        purpose = self.metadata.get("assetPurpose")
        if purpose:
            return purpose
        context = self.metadata.get("template_context") or {}
        return context.get("asset_purpose") or None

    @property
    def audio_class(self) -> Optional[str]:
        return self.metadata.get("audio_class") or self.metadata.get("asset_class")

    @property
    def is_generic(self) -> bool:
        """True when the asset is not tied to a specific child."""
        return not self.child_name


# ============================================================
# Children
# ============================================================

@dataclass
class Child:
    id: str
    name: str
    parent_id: Optional[str] = None
    age: Optional[int] = None
    primary_interest: Optional[str] = None
    theme: Optional[str] = None
    created_at: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Child":
        return cls(
            id=row["id"],
            name=row.get("name") or "",
            parent_id=row.get("parent_id"),
            age=row.get("age"),
            primary_interest=row.get("primary_interest"),
            theme=row.get("theme"),
            created_at=row.get("created_at"),
            raw=row,
        )


# ============================================================
# Videos
# ============================================================

@dataclass
class VideoAssignment:
    id: Optional[str]
    video_id: Optional[str]
    child_id: Optional[str]
    status: str
    assignment_type: Optional[str] = None
    publish_date: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    created_at: Optional[str] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "VideoAssignment":
        return cls(
            id=row.get("id"),
            video_id=row.get("video_id"),
            child_id=row.get("child_id"),
            status=row.get("status") or "",
            assignment_type=row.get("assignment_type"),
            publish_date=row.get("publish_date"),
            metadata=dict(row.get("metadata") or {}),
            created_at=row.get("created_at"),
        )


@dataclass
class ApprovedVideo:
    """
    A row of `child_approved_videos`, optionally with its embedded
    `video_assignments` when the query selected them.
    """

    id: str
    video_url: str
    child_id: Optional[str] = None
    child_name: Optional[str] = None
    video_title: Optional[str] = None
    template_type: Optional[str] = None
    approval_status: Optional[str] = None
    created_at: Optional[str] = None
    is_published: bool = False
    personalization_level: Optional[str] = None
    child_theme: Optional[str] = None
    template_data: Dict[str, Any] = field(default_factory=dict)
    assignments: List[VideoAssignment] = field(default_factory=list)
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "ApprovedVideo":
        assignments = row.get("video_assignments")
        return cls(
            id=row["id"],
            video_url=row.get("video_url") or "",
            child_id=row.get("child_id"),
            child_name=row.get("child_name"),
            video_title=row.get("video_title"),
            template_type=row.get("template_type"),
            approval_status=row.get("approval_status"),
            created_at=row.get("created_at"),
            is_published=bool(row.get("is_published")),
            personalization_level=row.get("personalization_level"),
            child_theme=row.get("child_theme"),
            template_data=dict(row.get("template_data") or {}),
            assignments=[
                VideoAssignment.from_row(a) for a in assignments
            ] if isinstance(assignments, list) else [],
            raw=row,
        )


@dataclass
class PlaylistEntry:
    """One element of `child_playlists.videos`."""

    id: str
    title: Optional[str]
    description: str
    parent_tip: str
    display_image: str
    video_url: str
    publish_date: Optional[str]
    personalization_level: Optional[str]
    child_theme: Optional[str]
    duration_seconds: Optional[float]
    is_published: bool
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# ============================================================
# Validation
# ============================================================

@dataclass
class ValidationError:
    field: str
    message: str


@dataclass
class ValidationResult:
    is_valid: bool
    errors: List[ValidationError] = field(default_factory=list)

    @classmethod
    def from_errors(cls, errors: List[ValidationError]) -> "ValidationResult":
        return cls(is_valid=not errors, errors=errors)
