"""Key frame blanking driven by the idx1 index.

Every key frame listed in idx1 after the first one has its chunk FOURCC
overwritten with 'JUNK'. Decoders skip JUNK chunks, so the predicted frames
that follow are applied on top of whatever picture came before.

idx1 offsets come in two flavours: file-absolute, or relative to the
'movi' list. A few muxers also count from the first chunk inside 'movi'
rather than from the list type. Each entry is resolved by probing the
candidates in turn and checking that the chunk found there carries the
FOURCC the entry names.
"""

from dataclasses import dataclass
from typing import Iterator, Literal

from deliframes.core.binary import BinaryView
from deliframes.core.errors import InvalidIndexEntryError, TruncatedFileError
from deliframes.core.riff import (
    AVIIF_KEYFRAME,
    CHUNK_HEADER_SIZE,
    FOURCC_JUNK,
    INDEX_ENTRY_SIZE,
    AVILayout,
    ChunkHeader,
    IndexEntry,
)

OffsetMode = Literal["auto", "absolute", "relative"]

CONVENTION_ABSOLUTE = "absolute"
CONVENTION_RELATIVE = "relative"
CONVENTION_RELATIVE_DATA = "relative-data"


@dataclass(frozen=True)
class PatchTarget:
    """A resolved write location for one key frame."""

    entry: IndexEntry
    position: int  # Absolute offset of the chunk FOURCC
    convention: str  # Offset convention that located the chunk
    already_patched: bool = False  # Chunk FOURCC already reads as the replacement


def read_index(view: BinaryView, layout: AVILayout) -> list[IndexEntry]:
    """Read every idx1 entry between ``layout.idx_start`` and ``layout.idx_end``."""
    view.seek(layout.idx_start)
    entries = []
    while view.tell() < layout.idx_end:
        if layout.idx_end - view.tell() < INDEX_ENTRY_SIZE:
            raise TruncatedFileError(
                f"Partial idx1 entry at offset {view.tell()} (index ends at {layout.idx_end})"
            )
        entries.append(IndexEntry.read(view))
    return entries


def collect_keyframes(
    entries: list[IndexEntry], keyframe_flag: int = AVIIF_KEYFRAME
) -> list[IndexEntry]:
    """Key-flagged entries, in index order."""
    return [entry for entry in entries if entry.is_keyframe(keyframe_flag)]


def candidate_positions(
    layout: AVILayout, entry: IndexEntry, offset_mode: OffsetMode = "auto"
) -> list[tuple[str, int]]:
    """Chunk header positions an index entry may refer to, in probing order."""
    candidates = []
    if offset_mode in ("auto", "absolute"):
        candidates.append((CONVENTION_ABSOLUTE, entry.offset))
    if offset_mode in ("auto", "relative"):
        candidates.append((CONVENTION_RELATIVE, layout.movi_offset + entry.offset))
        candidates.append((CONVENTION_RELATIVE_DATA, layout.movi_offset + 4 + entry.offset))
    return candidates


def _probe(view: BinaryView, position: int, file_size: int) -> ChunkHeader | None:
    """Chunk header at ``position``, or None if out of bounds."""
    if position < 0 or position + CHUNK_HEADER_SIZE > file_size:
        return None
    view.seek(position)
    return ChunkHeader.read(view)


def resolve_target(
    view: BinaryView,
    layout: AVILayout,
    entry: IndexEntry,
    replacement: bytes = FOURCC_JUNK,
    offset_mode: OffsetMode = "auto",
    file_size: int | None = None,
) -> PatchTarget:
    """Find the chunk an index entry refers to.

    Args:
        view: Binary view over the AVI file
        layout: Result of walking the file
        entry: Index entry to resolve
        replacement: FOURCC written by a previous run; a chunk carrying it
            with the entry's size counts as already patched
        offset_mode: Which offset conventions to try
        file_size: Stream length, computed if not given

    Returns:
        PatchTarget positioned on the chunk FOURCC

    Raises:
        InvalidIndexEntryError: no candidate position holds the expected chunk
    """
    if file_size is None:
        file_size = view.size()

    candidates = candidate_positions(layout, entry, offset_mode)
    found = {}
    for convention, position in candidates:
        header = _probe(view, position, file_size)
        if header is not None and header.id == entry.id:
            return PatchTarget(entry=entry, position=position, convention=convention)
        found[position] = header

    # A chunk blanked by an earlier run keeps its size but not its FOURCC
    for convention, position in candidates:
        header = found[position]
        if header is not None and header.id == replacement and header.size == entry.size:
            return PatchTarget(
                entry=entry,
                position=position,
                convention=convention,
                already_patched=True,
            )

    raise InvalidIndexEntryError(entry, [position for _, position in candidates])


def iter_targets(
    view: BinaryView,
    layout: AVILayout,
    keep_first: bool = True,
    replacement: bytes = FOURCC_JUNK,
    keyframe_flag: int = AVIIF_KEYFRAME,
    offset_mode: OffsetMode = "auto",
) -> Iterator[PatchTarget]:
    """Yield the resolved patch targets one at a time.

    The whole index is read before the first target is resolved.
    """
    keyframes = collect_keyframes(read_index(view, layout), keyframe_flag)
    if keep_first:
        keyframes = keyframes[1:]

    file_size = view.size()
    for entry in keyframes:
        yield resolve_target(
            view,
            layout,
            entry,
            replacement=replacement,
            offset_mode=offset_mode,
            file_size=file_size,
        )


def plan_patches(view: BinaryView, layout: AVILayout, **kwargs) -> list[PatchTarget]:
    """Resolve all patch targets without writing anything."""
    return list(iter_targets(view, layout, **kwargs))


def patch_keyframes(
    reader: BinaryView,
    layout: AVILayout,
    writer: BinaryView | None = None,
    keep_first: bool = True,
    replacement: bytes = FOURCC_JUNK,
    keyframe_flag: int = AVIIF_KEYFRAME,
    offset_mode: OffsetMode = "auto",
) -> list[PatchTarget]:
    """Overwrite the FOURCC of every key frame chunk after the first.

    Targets are resolved against ``reader`` and written to ``writer`` at the
    same offsets, so the writer may be a verbatim copy of the reader. The
    first failure aborts; targets written before it stay written.

    Args:
        reader: View the index and chunk headers are read from
        layout: Result of walking ``reader``
        writer: View to write to (default: ``reader``)
        keep_first: Leave the first key frame intact so decoding can start
        replacement: FOURCC written over each target
        keyframe_flag: idx1 flag bit identifying key frames
        offset_mode: Which offset conventions to try

    Returns:
        The targets, in index order
    """
    if len(replacement) != 4:
        raise ValueError(f"Replacement FOURCC must be 4 bytes, got {replacement!r}")

    if writer is None:
        writer = reader
    targets = []
    for target in iter_targets(
        reader,
        layout,
        keep_first=keep_first,
        replacement=replacement,
        keyframe_flag=keyframe_flag,
        offset_mode=offset_mode,
    ):
        writer.write_at(target.position, replacement)
        targets.append(target)
    return targets
