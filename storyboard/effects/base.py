"""Effect windows shared by the shape and text effect engines."""

from dataclasses import dataclass

from storyboard.keyframes import normalize_offset


@dataclass(frozen=True)
class EffectWindow:
    """Frames [offset, offset + duration) an effect covers."""
    offset: int
    duration: int

    @property
    def end(self) -> int:
        return self.offset + self.duration

    @property
    def last(self) -> int:
        return self.offset + self.duration - 1

    @property
    def frames(self) -> range:
        return range(self.offset, self.end)

    def progress(self, frame: int) -> float:
        """Fraction of the window elapsed at frame; reaches 1 only one past the end."""
        return (frame - self.offset) / self.duration


def shape_window(offset: int, duration: int | None, scene_duration: int) -> EffectWindow:
    """Window of a shape effect, clamped to the scene."""
    start = max(0, normalize_offset(offset, scene_duration))
    available = scene_duration - start
    length = max(0, available if duration is None else min(available, duration))
    return EffectWindow(offset=start, duration=length)


def text_window(offset: int | None, duration: int | None, frame_duration: int) -> EffectWindow:
    """Window of a text effect inside its frame; a zero or missing duration means the rest of the frame."""
    start = max(0, normalize_offset(offset or 0, frame_duration))
    available = frame_duration - start
    return EffectWindow(offset=start, duration=min(available, duration or available))
