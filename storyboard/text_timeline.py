"""Build the global text timeline from declared text frames."""

import logging
import random

from storyboard.config import TextConfig
from storyboard.effects.text_effects import apply_text_effects
from storyboard.models import TextFrame, TextFrameDef

logger = logging.getLogger(__name__)


def frame_durations(frames: list[TextFrameDef], last_frame_duration: int = 1) -> list[int]:
    """Each frame lasts until the next one starts; the last uses its declared duration."""
    durations = []
    for index, frame in enumerate(frames):
        if index + 1 < len(frames):
            durations.append(frames[index + 1].time - frame.time)
        elif frame.duration is not None:
            durations.append(frame.duration)
        else:
            durations.append(last_frame_duration)
    return durations


def build_text_timeline(
    frames: list[TextFrameDef],
    rng: random.Random,
    config: TextConfig | None = None,
) -> list[TextFrame]:
    """Expand every declared frame's effects and merge them into one timeline.

    Frames are unique by time: a later write at an existing time replaces it.
    """
    config = config or TextConfig()
    ordered = sorted(frames, key=lambda f: f.time)
    durations = frame_durations(ordered, config.last_frame_duration)

    by_time: dict[int, TextFrame] = {}
    for frame, duration in zip(ordered, durations):
        local = apply_text_effects(frame, duration, rng, config)
        for item in local:
            by_time[frame.time + item.time] = item.model_copy(update={"time": frame.time + item.time})

    timeline = [by_time[time] for time in sorted(by_time)]
    logger.debug("Text timeline: %d declared frames -> %d frames", len(frames), len(timeline))
    return timeline
