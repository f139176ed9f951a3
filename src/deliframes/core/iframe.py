"""Key frame removal drivers.

Removing every key frame but the first is the classic datamoshing
preparation. The decoder starts from the one remaining key frame and keeps
applying motion deltas to stale pictures wherever a later key frame used
to reset the image.
"""

import os
import shutil
import tempfile
from pathlib import Path

from deliframes.config.schema import PatchConfig
from deliframes.core.binary import BinaryView
from deliframes.core.patcher import (
    PatchTarget,
    collect_keyframes,
    patch_keyframes,
    plan_patches,
    read_index,
)
from deliframes.core.riff import walk_avi


def remove_keyframes(path: Path | str, config: PatchConfig | None = None) -> list[PatchTarget]:
    """Blank key frames in place.

    Args:
        path: AVI file to modify
        config: Patch settings (default: PatchConfig())

    Returns:
        The patched targets
    """
    config = config or PatchConfig()

    with open(path, "r+b") as f:
        view = BinaryView(f)
        layout = walk_avi(view)
        return patch_keyframes(view, layout, **config.patch_kwargs())


def copy_and_remove_keyframes(
    source: Path | str,
    target: Path | str,
    config: PatchConfig | None = None,
) -> list[PatchTarget]:
    """Copy ``source`` to ``target``, then blank key frames in the copy.

    The source is only ever read. Offsets are resolved against the source
    and the writes land at the same offsets in the copy.

    Args:
        source: AVI file to read
        target: Output path, overwritten if it exists
        config: Patch settings (default: PatchConfig())

    Returns:
        The patched targets
    """
    config = config or PatchConfig()
    shutil.copyfile(source, target)

    with open(source, "rb") as src, open(target, "r+b") as dst:
        reader = BinaryView(src)
        layout = walk_avi(reader)
        return patch_keyframes(reader, layout, writer=BinaryView(dst), **config.patch_kwargs())


def remove_keyframes_atomic(path: Path | str, config: PatchConfig | None = None) -> list[PatchTarget]:
    """Blank key frames through a temporary copy that replaces ``path`` on success.

    If anything fails, ``path`` is left untouched.
    """
    path = Path(path)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    os.close(fd)
    tmp_path = Path(tmp_name)

    try:
        targets = copy_and_remove_keyframes(path, tmp_path, config)
        shutil.copymode(path, tmp_path)
        os.replace(tmp_path, path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise

    return targets


def get_keyframe_info(path: Path | str, config: PatchConfig | None = None) -> dict:
    """Describe the key frames of an AVI file without modifying it.

    Args:
        path: AVI file
        config: Patch settings used to select and resolve targets

    Returns:
        Dictionary with index and key frame information
    """
    config = config or PatchConfig()

    with open(path, "rb") as f:
        view = BinaryView(f)
        layout = walk_avi(view)
        entries = read_index(view, layout)
        keyframes = collect_keyframes(entries, config.keyframe_flag)
        targets = plan_patches(view, layout, **config.patch_kwargs())

    return {
        "movi_offset": layout.movi_offset,
        "index_entries": len(entries),
        "keyframe_count": len(keyframes),
        "target_count": len(targets),
        "already_patched": sum(1 for t in targets if t.already_patched),
        "conventions": sorted({t.convention for t in targets}),
        "targets": targets,
    }
