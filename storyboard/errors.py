"""Errors that abort a compile."""


class StoryboardError(Exception):
    """Base class for compile failures."""


class UnknownTargetError(StoryboardError):
    """A keyframe or effect group names a shape that is not in its scene."""

    def __init__(self, target: str) -> None:
        super().__init__(f'Invalid animation target: "{target}"')
        self.target = target


class InvalidColorError(StoryboardError):
    """A fill, stroke or text colour is not a CSS colour."""

    def __init__(self, value: str) -> None:
        super().__init__(f'Invalid color: "{value}"')
        self.value = value


class UnknownEffectError(StoryboardError):
    """An effect name is not one of the defined kinds."""

    def __init__(self, name: str, text: bool = False) -> None:
        label = "text effect" if text else "effect"
        super().__init__(f"Invalid {label}: {name}")
        self.name = name
