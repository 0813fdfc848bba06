"""Text transforms applied to command output."""

from typing import Callable, Optional

TransformFunction = Callable[[str], str]


def prefix_transform(prefix: str) -> TransformFunction:
    """Build a transform that labels each chunk with ``"<prefix> "``.

    Chunks are rewritten independently; a line split across two chunks comes
    out as two separately prefixed fragments.
    """
    head = f"{prefix} "

    def _apply(chunk: str) -> str:
        return head + chunk

    return _apply


def transform_string(transform: Optional[TransformFunction], text: str) -> str:
    """Apply ``transform`` to ``text``; identity when no transform is set."""
    if transform is None:
        return text
    return str(transform(text))


def chain(*transforms: Optional[TransformFunction]) -> Optional[TransformFunction]:
    """Compose transforms left to right, skipping ``None``."""
    steps = [t for t in transforms if t is not None]
    if not steps:
        return None
    if len(steps) == 1:
        return steps[0]

    def _apply(text: str) -> str:
        for step in steps:
            text = step(text)
        return text

    return _apply
