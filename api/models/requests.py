"""
Request bodies accepted by the API.

Field names follow the web app's JSON (camelCase) where the caller is the
web app or the render service.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class FormKind(str, Enum):
    """Which asset form a `ValidateFormRequest` carries."""

    UPLOAD = "upload"
    EDIT = "edit"
    REVIEW = "review"
    BULK_UPLOAD = "bulk_upload"


class ValidateFormRequest(BaseModel):
    kind: FormKind = Field(..., description="Form to validate")
    form: Dict[str, Any] = Field(default_factory=dict)
    file_name: Optional[str] = None
    file_size: Optional[int] = Field(default=None, ge=0, description="Bytes")
    content_type: Optional[str] = Field(default=None, description="MIME type reported by the browser")
    files: List[str] = Field(default_factory=list, description="File names for bulk uploads")


class ApproveAssetRequest(BaseModel):
    safe_zones: List[str] = Field(default_factory=list)
    notes: Optional[str] = None


class RejectAssetRequest(BaseModel):
    reason: str = Field(..., min_length=1, max_length=500)


class RenderWebhookRequest(BaseModel):
    """Callback sent by the render service when a render finishes."""

    renderId: Optional[str] = None
    outputFile: Optional[str] = None
    error: Optional[str] = None


class GeneratePromptsRequest(BaseModel):
    theme: str = Field(..., min_length=1)
    ageRange: str = Field(..., min_length=1)
    template: str
    childName: Optional[str] = None
    personalization: str = "general"
    safeZones: List[str] = Field(default_factory=lambda: ["center_safe"])
    promptCount: int = 1
    aspectRatio: str = "16:9"
    artStyle: str = "2D Pixar Style"
    customArtStyle: str = ""
    additionalContext: Optional[str] = None
    save: bool = True
