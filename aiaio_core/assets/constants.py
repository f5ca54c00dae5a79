"""
Asset vocabulary shared by validation, matching and the admin API.
"""

ASSETS_PER_PAGE = 50

ASSET_STATUSES = ("pending", "approved", "rejected")

ASSET_TYPES = ("image", "audio", "video", "prompt")

TEMPLATES = ("lullaby", "name-video", "letter-hunt", "general")

PERSONALIZATION_OPTIONS = ("general", "personalized")

SAFE_ZONE_OPTIONS = (
    "left_safe",
    "right_safe",
    "center_safe",
    "intro_safe",
    "outro_safe",
    "all_ok",
    "not_applicable",
    "frame",
    "slideshow",
)

IMAGE_TYPES = (
    "titleCard",
    "signImage",
    "bookImage",
    "groceryImage",
    "endingImage",
    "characterImage",
    "sceneImage",
)

ASPECT_RATIOS = ("16:9", "9:16")

MB = 1024 * 1024

# bytes
MAX_FILE_SIZE = {
    "image": 10 * MB,
    "audio": 50 * MB,
    "video": 100 * MB,
    "prompt": 1024,
}

ALLOWED_FILE_EXTENSIONS = {
    "image": (".jpg", ".jpeg", ".png", ".gif", ".webp", ".svg"),
    "audio": (".mp3", ".wav", ".ogg", ".m4a", ".aac"),
    "video": (".mp4", ".webm", ".mov", ".avi", ".mkv"),
    "prompt": (".txt", ".md"),
}

ALLOWED_MIME_TYPES = {
    "image": ("image/jpeg", "image/png", "image/gif", "image/webp", "image/svg+xml"),
    "audio": ("audio/mpeg", "audio/wav", "audio/ogg", "audio/mp4", "audio/aac"),
    "video": ("video/mp4", "video/webm", "video/quicktime", "video/x-msvideo", "video/x-matroska"),
    "prompt": ("text/plain", "text/markdown"),
}

VOLUME_RANGE = (0.0, 2.0)
SPEED_RANGE = (0.5, 2.0)

REQUIRED_FIELD = "This field is required"
INVALID_FILE_TYPE = "Invalid file type for selected asset type"
FILE_TOO_LARGE = "File size exceeds maximum allowed size"
INVALID_VOLUME = "Volume must be between 0 and 2"
INVALID_SPEED = "Speed must be between 0.5 and 2"
NO_FILES_SELECTED = "Please select at least one file"


def min_length_message(minimum: int) -> str:
    return f"Must be at least {minimum} characters"


def max_length_message(maximum: int) -> str:
    return f"Must be no more than {maximum} characters"
