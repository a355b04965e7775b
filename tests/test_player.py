"""Tests for yrepeat/player.py: time formatting, URLs and the repeat loop."""

import pytest

from yrepeat.player import (
    COMPLETE,
    SEEK,
    RepeatLoop,
    extract_video_id,
    seconds_to_time,
    time_to_seconds,
)


def test_seconds_to_time():
    assert seconds_to_time(0) == "0:00"
    assert seconds_to_time(65.9) == "1:05"
    assert seconds_to_time(3725) == "1:02:05"
    assert seconds_to_time(-5) == "0:00"


@pytest.mark.parametrize(
    "text,expected",
    [("90", 90), ("1:30", 90), ("01:02:05", 3725), ("  2:00 ", 120), ("", 0), ("abc", 0), ("12.5", 12.5)],
)
def test_time_to_seconds(text, expected):
    assert time_to_seconds(text) == expected


@pytest.mark.parametrize(
    "url,expected",
    [
        ("https://youtu.be/dQw4w9WgXcQ?t=3", "dQw4w9WgXcQ"),
        ("https://www.youtube.com/watch?v=dQw4w9WgXcQ&t=10s", "dQw4w9WgXcQ"),
        ("www.youtube.com/watch?feature=share&v=dQw4w9WgXcQ", "dQw4w9WgXcQ"),
        ("dQw4w9WgXcQ", "dQw4w9WgXcQ"),
        ("https://example.com/video", None),
        ("https://www.youtube.com/watch?list=abc", None),
    ],
)
def test_extract_video_id(url, expected):
    assert extract_video_id(url) == expected


def test_loop_rejects_bad_sections():
    with pytest.raises(ValueError):
        RepeatLoop(20, 10)
    with pytest.raises(ValueError):
        RepeatLoop(0, 0)
    with pytest.raises(ValueError):
        RepeatLoop(0, 10, -1)


def test_finite_loop_completes():
    loop = RepeatLoop(10, 20, repeat_count=2)
    assert loop.status() == "Repeat started (2 times)"
    assert loop.tick(15) is None
    assert loop.tick(20) == SEEK
    assert loop.status() == "Repeat 1/2"
    assert loop.tick(20.4) is None
    assert loop.tick(10) is None
    assert loop.tick(20.1) == COMPLETE
    assert loop.enabled is False
    assert loop.status() == "Repeat completed - video paused"
    assert loop.tick(25) is None


def test_loop_rearms_only_a_second_before_end():
    loop = RepeatLoop(10, 20)
    assert loop.tick(20) == SEEK
    assert loop.tick(19.5) is None
    assert loop.tick(20) is None
    assert loop.tick(18.9) is None
    assert loop.tick(20) == SEEK
    assert loop.current_count == 2
    assert loop.status() == "Repeat 2"


def test_infinite_loop_never_completes():
    loop = RepeatLoop(0, 5, repeat_count=0)
    assert loop.status() == "Repeat started (infinite)"
    for _ in range(50):
        assert loop.tick(5) == SEEK
        loop.tick(0)
    assert loop.enabled is True


def test_stop():
    loop = RepeatLoop(0, 5, repeat_count=3)
    loop.tick(5)
    loop.stop()
    assert loop.current_count == 0
    assert loop.tick(5) is None
