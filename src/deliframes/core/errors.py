"""Errors raised while walking and patching AVI files."""


class AVIError(ValueError):
    """Base class for malformed or unsupported AVI input."""

    kind = "avi_error"


class TruncatedFileError(AVIError, EOFError):
    """The file ended in the middle of a structure."""

    kind = "io_error"


class MissingIndexError(TruncatedFileError):
    """The top-level chunks ran out before an idx1 chunk was found."""


class InvalidFourCCError(AVIError):
    """The outer chunk is not a RIFF chunk."""

    kind = "invalid_fourcc"


class InvalidFileTypeError(AVIError):
    """The RIFF form type is not 'AVI '."""

    kind = "invalid_filetype"


class MissingMoviError(AVIError):
    """idx1 was reached without seeing a 'movi' LIST."""

    kind = "missing_movi"


class InvalidIndexEntryError(AVIError):
    """An idx1 entry points at a chunk with a different FOURCC."""

    kind = "invalid_index_entry"

    def __init__(self, entry, probed: list[int]):
        self.entry = entry
        self.probed = probed
        offsets = ", ".join(str(p) for p in probed) or "none"
        super().__init__(
            f"Index entry {entry.id!r} at offset {entry.offset} "
            f"matches no chunk (probed: {offsets})"
        )
