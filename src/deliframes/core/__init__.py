"""AVI walking and key frame removal."""

from deliframes.core.iframe import (
    copy_and_remove_keyframes,
    get_keyframe_info,
    remove_keyframes,
    remove_keyframes_atomic,
)

__all__ = [
    "remove_keyframes",
    "copy_and_remove_keyframes",
    "remove_keyframes_atomic",
    "get_keyframe_info",
]
