"""Text frame effects.

A text frame starts as a single local frame at time 0. Each effect rewrites
the frames inside its window and leaves the frames around it alone.
"""

import logging
import math
import random
from typing import Callable

from storyboard.colors import with_alpha
from storyboard.config import TextConfig
from storyboard.effects.base import EffectWindow, text_window
from storyboard.errors import UnknownEffectError
from storyboard.models import TextEffectKind, TextEffectOptions, TextFrame, TextFrameDef, Vector2

logger = logging.getLogger(__name__)

TextEffect = Callable[
    [list[TextFrame], EffectWindow, TextEffectOptions, random.Random, TextConfig],
    list[TextFrame],
]


def apply_text_effects(
    frame: TextFrameDef,
    duration: int,
    rng: random.Random,
    config: TextConfig,
) -> list[TextFrame]:
    """Local frames (times relative to the frame start) for one declared frame."""
    frames = [TextFrame(time=0, text=frame.text, style=frame.style, position=frame.position)]
    for effect in frame.effects:
        kind = text_effect_kind(effect.kind)
        window = text_window(effect.offset, effect.duration, duration)
        inside = frames_slice(frames, window.offset, window.duration)
        processed = TEXT_EFFECTS[kind](inside, window, effect.options, rng, config)
        head = [] if window.offset == 0 else frames_slice(frames, 0, window.offset)
        tail = [] if window.end == duration else frames_slice(frames, window.end, duration - window.end)
        frames = head + processed + tail
    return frames


def text_effect_kind(name: str) -> TextEffectKind:
    try:
        return TextEffectKind(name)
    except ValueError:
        raise UnknownEffectError(name, text=True) from None


# --- Effects ---


def fade_in(frames, window, options, rng, config):
    return [
        _with_opacity(frame_at(frames, offset), offset, window.progress(offset), config)
        for offset in window.frames
    ]


def fade_out(frames, window, options, rng, config):
    return [
        _with_opacity(frame_at(frames, offset), offset, 1 - window.progress(offset), config)
        for offset in window.frames
    ]


def animate_in(frames, window, options, rng, config):
    shift = options.offset or Vector2()
    return [
        _moved(frame_at(frames, offset), offset, shift, 1 - window.progress(offset))
        for offset in window.frames
    ]


def animate_out(frames, window, options, rng, config):
    shift = options.offset or Vector2()
    return [
        _moved(frame_at(frames, offset), offset, shift, window.progress(offset))
        for offset in window.frames
    ]


def typewriter(frames, window, options, rng, config):
    """Reveal each frame's text one character at a time, spread over the frame."""
    result = frames
    for frame, duration in with_durations(frames, window.end):
        text = frame.text
        steps = len(text) + 1
        for index in range(steps):
            progress = index / (steps - 1) if steps > 1 else 0
            time = frame.time + _round_half_up(progress * (duration - 1))
            source = frame_at(result, time)
            result = insert_frame(result, source.model_copy(update={"time": time, "text": text[:index]}))
    return result


def cursor(frames, window, options, rng, config):
    glyph = options.cursor or config.cursor
    blink = options.blink_duration or config.blink_duration

    def with_cursor(frame: TextFrame) -> TextFrame:
        return frame.model_copy(update={"text": frame.text + glyph})

    result = []
    for frame, duration in with_durations(frames, window.end):
        result.append(with_cursor(frame))
        for index in range((duration - 1) // blink):
            blink_frame = frame.model_copy(update={"time": frame.time + (index + 1) * blink})
            # even blinks hide the cursor, odd ones show it again
            result.append(blink_frame if index % 2 == 0 else with_cursor(blink_frame))
    return result


def prepend(frames, window, options, rng, config):
    prefix = options.text or ""
    return [frame.model_copy(update={"text": prefix + frame.text}) for frame in frames]


def jitter(frames, window, options, rng, config):
    amount = options.amount
    jittered = []
    for offset in window.frames:
        frame = frame_at(frames, offset)
        position = frame.position or config.default_position
        factor = window.progress(offset) if options.increasing else 1
        dx = factor * (-0.5 * amount + rng.random() * amount)
        dy = factor * (-0.5 * amount + rng.random() * amount)
        jittered.append(frame.model_copy(update={
            "time": offset,
            "position": Vector2(x=position.x + dx, y=position.y + dy),
        }))
    return jittered


TEXT_EFFECTS: dict[TextEffectKind, TextEffect] = {
    TextEffectKind.FADE_IN: fade_in,
    TextEffectKind.FADE_OUT: fade_out,
    TextEffectKind.ANIMATE_IN: animate_in,
    TextEffectKind.ANIMATE_OUT: animate_out,
    TextEffectKind.TYPEWRITER: typewriter,
    TextEffectKind.CURSOR: cursor,
    TextEffectKind.PREPEND: prepend,
    TextEffectKind.JITTER: jitter,
}


# --- Frame list helpers ---


def frame_at(frames: list[TextFrame], time: int) -> TextFrame:
    """Latest frame at or before time, falling back to the first one."""
    candidates = [f for f in frames if f.time <= time]
    return candidates[-1] if candidates else frames[0]


def insert_frame(frames: list[TextFrame], frame: TextFrame) -> list[TextFrame]:
    """Insert in time order, replacing a frame at the same time."""
    return (
        [f for f in frames if f.time < frame.time]
        + [frame]
        + [f for f in frames if f.time > frame.time]
    )


def frames_slice(frames: list[TextFrame], offset: int, duration: int) -> list[TextFrame]:
    """Frames in [offset, offset + duration), always starting exactly at offset."""
    inside = [f for f in frames if offset <= f.time < offset + duration]
    if inside and inside[0].time == offset:
        return inside
    start = frame_at(frames, offset).model_copy(update={"time": offset})
    return [start] + inside


def with_durations(frames: list[TextFrame], end: int) -> list[tuple[TextFrame, int]]:
    """Pair each frame with the time until the next one (or until end)."""
    pairs = []
    for index, frame in enumerate(frames):
        next_time = frames[index + 1].time if index + 1 < len(frames) else end
        pairs.append((frame, next_time - frame.time))
    return pairs


def _with_opacity(frame: TextFrame, time: int, opacity: float, config: TextConfig) -> TextFrame:
    style = dict(frame.style)
    style["color"] = with_alpha(style.get("color") or config.default_color, opacity)
    return frame.model_copy(update={"time": time, "style": style})


def _moved(frame: TextFrame, time: int, shift: Vector2, amount: float) -> TextFrame:
    position = frame.position or Vector2()
    return frame.model_copy(update={
        "time": time,
        "position": Vector2(x=position.x + amount * shift.x, y=position.y + amount * shift.y),
    })


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)
