"""Clip-repeat player logic: time formatting, video URLs and the repeat loop.

The loop is driven by polling: the caller feeds the player's current
position to :meth:`RepeatLoop.tick` a few times a second and performs
the action it returns.
"""

from __future__ import annotations

import math
from urllib.parse import parse_qs, urlparse

VIDEO_ID_LENGTH = 11
REARM_MARGIN_SECONDS = 1.0

SEEK = "seek"
COMPLETE = "complete"


def seconds_to_time(seconds: float) -> str:
    """Format as H:MM:SS when at least an hour, else M:SS."""
    total = max(0, int(seconds))
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)
    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def _number(text: str) -> float | None:
    try:
        value = float(text)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def time_to_seconds(text: str) -> float:
    """Parse plain seconds, MM:SS or HH:MM:SS. Anything unparseable is 0."""
    trimmed = text.strip()
    if not trimmed:
        return 0.0
    if ":" not in trimmed:
        return _number(trimmed) or 0.0

    parts = [n for n in (_number(p) for p in trimmed.split(":") if p) if n is not None]
    if len(parts) == 3:
        return parts[0] * 3600 + parts[1] * 60 + parts[2]
    if len(parts) == 2:
        return parts[0] * 60 + parts[1]
    if len(parts) == 1:
        return parts[0]
    return 0.0


def extract_video_id(url: str) -> str | None:
    """Video id from a youtu.be link, a youtube.com/watch link or a bare id."""
    if "youtu.be/" in url:
        return url.split("youtu.be/", 1)[1].split("?", 1)[0] or None
    if "youtube.com/watch" in url:
        if "://" not in url:
            url = "https://" + url
        values = parse_qs(urlparse(url).query).get("v")
        return values[0] if values else None
    if len(url) == VIDEO_ID_LENGTH and "/" not in url:
        return url
    return None


class RepeatLoop:
    """Repeat a [start, end] section of a video a fixed or infinite number of times.

    A repeat_count of 0 loops forever. Each pass past ``end`` counts once;
    the loop re-arms only after playback is back at least one second
    before ``end``.
    """

    def __init__(self, start_time: float, end_time: float, repeat_count: int = 0):
        if end_time <= start_time:
            raise ValueError("End time must be greater than start time")
        if end_time <= 0:
            raise ValueError("Please set an end time")
        if repeat_count < 0:
            raise ValueError("Repeat count must not be negative")
        self.start_time = start_time
        self.end_time = end_time
        self.repeat_count = repeat_count
        self.current_count = 0
        self.enabled = True
        self._has_looped = False

    @property
    def is_infinite(self) -> bool:
        return self.repeat_count == 0

    def tick(self, current_time: float) -> str | None:
        """Advance with the player's position; returns SEEK, COMPLETE or None."""
        if not self.enabled:
            return None

        if current_time >= self.end_time:
            if self._has_looped:
                return None
            self._has_looped = True
            self.current_count += 1
            if self.repeat_count > 0 and self.current_count >= self.repeat_count:
                self.enabled = False
                return COMPLETE
            return SEEK

        if current_time < self.end_time - REARM_MARGIN_SECONDS:
            self._has_looped = False
        return None

    def stop(self) -> None:
        self.enabled = False
        self.current_count = 0

    def status(self) -> str:
        if not self.enabled and self.repeat_count > 0 and self.current_count >= self.repeat_count:
            return "Repeat completed - video paused"
        if self.current_count == 0:
            return "Repeat started (infinite)" if self.is_infinite else f"Repeat started ({self.repeat_count} times)"
        suffix = "" if self.is_infinite else f"/{self.repeat_count}"
        return f"Repeat {self.current_count}{suffix}"
