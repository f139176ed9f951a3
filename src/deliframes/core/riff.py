"""AVI RIFF structure walking.

An AVI file is a RIFF chunk with form type 'AVI '. Its top-level children
are chunks of the form ``FOURCC, uint32 size, payload`` and include:

- LIST 'hdrl': stream headers
- LIST 'movi': the media chunks (00dc, 01wb, ...)
- idx1: the legacy index, a flat array of 16-byte entries

Only the top level is walked. LISTs other than 'movi' are skipped whole.
"""

from dataclasses import dataclass

from deliframes.core.binary import BinaryView
from deliframes.core.errors import (
    InvalidFileTypeError,
    InvalidFourCCError,
    MissingIndexError,
    MissingMoviError,
    TruncatedFileError,
)

FOURCC_RIFF = b"RIFF"
FOURCC_AVI = b"AVI "
FOURCC_LIST = b"LIST"
FOURCC_MOVI = b"movi"
FOURCC_IDX1 = b"idx1"
FOURCC_JUNK = b"JUNK"

# idx1 entry flag marking a key frame
AVIIF_KEYFRAME = 0x10

CHUNK_HEADER_FORMAT = "<4sI"
CHUNK_HEADER_SIZE = 8
INDEX_ENTRY_FORMAT = "<4siii"
INDEX_ENTRY_SIZE = 16


@dataclass(frozen=True)
class ChunkHeader:
    """RIFF chunk header."""

    id: bytes  # FOURCC
    size: int  # Payload length, excluding header and pad byte

    @classmethod
    def read(cls, view: BinaryView) -> "ChunkHeader":
        fourcc, size = view.read_struct(CHUNK_HEADER_FORMAT)
        return cls(id=fourcc, size=size)


@dataclass(frozen=True)
class IndexEntry:
    """One idx1 record."""

    id: bytes  # FOURCC of the referenced chunk, e.g. b"00dc"
    flags: int
    offset: int  # File-absolute or relative to 'movi', depending on the muxer
    size: int  # Payload length of the referenced chunk

    @classmethod
    def read(cls, view: BinaryView) -> "IndexEntry":
        fourcc, flags, offset, size = view.read_struct(INDEX_ENTRY_FORMAT)
        return cls(id=fourcc, flags=flags, offset=offset, size=size)

    def is_keyframe(self, flag: int = AVIIF_KEYFRAME) -> bool:
        return bool(self.flags & flag)


@dataclass(frozen=True)
class AVILayout:
    """Where the interesting parts of an AVI file live."""

    movi_offset: int  # Offset of the 'movi' list type, the LIST's first payload byte
    idx_start: int  # Offset of the first idx1 entry
    idx_end: int  # One past the last idx1 byte

    @property
    def index_size(self) -> int:
        return self.idx_end - self.idx_start


def walk_avi(view: BinaryView) -> AVILayout:
    """Walk the top-level chunks of an AVI file up to its idx1 chunk.

    The view must be positioned at offset 0. On return it is positioned at
    the first idx1 entry.

    Args:
        view: Binary view over the AVI file

    Returns:
        AVILayout with the 'movi' offset and the idx1 bounds

    Raises:
        InvalidFourCCError: the file does not start with 'RIFF'
        InvalidFileTypeError: the RIFF form type is not 'AVI '
        MissingMoviError: idx1 was found before any 'movi' LIST
        MissingIndexError: the file ended before an idx1 chunk
    """
    riff = ChunkHeader.read(view)
    if riff.id != FOURCC_RIFF:
        raise InvalidFourCCError(f"Not a RIFF file: starts with {riff.id!r}")

    form_type = view.read_fourcc()
    if form_type != FOURCC_AVI:
        raise InvalidFileTypeError(f"Not an AVI file: RIFF form type is {form_type!r}")

    movi_offset = None

    while True:
        try:
            header = ChunkHeader.read(view)
        except TruncatedFileError as e:
            raise MissingIndexError(f"No idx1 chunk found: {e}") from e

        if header.id == FOURCC_LIST:
            list_type = view.read_fourcc()
            offset = view.skip(-4)
            if list_type == FOURCC_MOVI:
                movi_offset = offset

        if header.id == FOURCC_IDX1:
            break

        view.skip(header.size)
        # Odd-sized chunks are followed by a pad byte
        if header.size % 2 == 1:
            view.skip(1)

    if movi_offset is None:
        raise MissingMoviError("No 'movi' LIST before the idx1 chunk")

    idx_start = view.tell()
    return AVILayout(
        movi_offset=movi_offset,
        idx_start=idx_start,
        idx_end=idx_start + header.size,
    )
