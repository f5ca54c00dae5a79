"""
Frame timing of the rendered templates.

The render service owns the compositions; these numbers mirror them so that
duration problems (a 29 s render when 37 s was expected) can be diagnosed
without opening the composition code.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple

LETTER_HUNT_FPS = 30
NAME_VIDEO_FPS = 30
LULLABY_FPS = 60

# frames at 30 fps
TITLE_FRAMES = 90
INTRO_FRAMES = 165
EXTENDED_FRAMES = 120
CLOSING_FRAMES = 165

NAME_SEGMENT_FRAMES = 120
LULLABY_DEFAULT_SECONDS = 108


@dataclass(frozen=True)
class Segment:
    name: str
    start: int
    duration: int

    @property
    def end(self) -> int:
        return self.start + self.duration

    def seconds(self, fps: int) -> Tuple[float, float, float]:
        """(start, duration, end) in seconds."""
        return self.start / fps, self.duration / fps, self.end / fps


def build_segments(durations: Iterable[Tuple[str, int]]) -> List[Segment]:
    segments: List[Segment] = []
    start = 0
    for name, duration in durations:
        segments.append(Segment(name, start, duration))
        start += duration
    return segments


def total_frames(segments: Sequence[Segment]) -> int:
    return segments[-1].end if segments else 0


def letter_hunt_segments() -> List[Segment]:
    return build_segments(
        [
            ("titleCard", TITLE_FRAMES),
            ("intro", INTRO_FRAMES),
            ("intro2", INTRO_FRAMES),
            ("sign", EXTENDED_FRAMES),
            ("book", EXTENDED_FRAMES),
            ("grocery", EXTENDED_FRAMES),
            ("happyDance", CLOSING_FRAMES),
            ("ending", CLOSING_FRAMES),
        ]
    )


def name_video_duration(child_name: Optional[str]) -> int:
    """One segment per letter plus intro and outro; empty names count as 4 letters."""
    letters = len(child_name or "") or 4
    return (letters + 2) * NAME_SEGMENT_FRAMES


def lullaby_duration(seconds: float = LULLABY_DEFAULT_SECONDS, fps: int = LULLABY_FPS) -> int:
    return round(seconds * fps)


def segments_ending_near(
    segments: Iterable[Segment],
    seconds: float,
    fps: int = LETTER_HUNT_FPS,
    tolerance: float = 0.5,
) -> List[Segment]:
    """Segments whose end falls within `tolerance` seconds of `seconds`."""
    return [s for s in segments if abs(s.end / fps - seconds) < tolerance]


@dataclass
class TimelineCheck:
    expected_frames: int
    actual_frames: int
    gaps: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.expected_frames == self.actual_frames and not self.gaps


def verify_timeline(segments: Sequence[Segment], expected_frames: int) -> TimelineCheck:
    """Compare the summed timeline with the composition length and flag gaps/overlaps."""
    gaps = []
    for previous, current in zip(segments, segments[1:]):
        if current.start != previous.end:
            gaps.append(
                f"{current.name} starts at {current.start}, previous ends at {previous.end}"
            )
    return TimelineCheck(expected_frames, total_frames(segments), gaps)
