"""Little-endian binary view over a seekable file object."""

import os
import struct
from typing import BinaryIO

from deliframes.core.errors import TruncatedFileError


class BinaryView:
    """Fixed-width reads, seeks and positional writes on a binary stream.

    The view never buffers; every call goes straight to the wrapped stream,
    so it can share a file handle with other code.
    """

    def __init__(self, stream: BinaryIO):
        self.stream = stream

    def read_exact(self, n: int) -> bytes:
        """Read exactly ``n`` bytes.

        Raises:
            TruncatedFileError: if the stream ends first
        """
        start = self.stream.tell()
        data = self.stream.read(n)
        if len(data) != n:
            raise TruncatedFileError(
                f"Expected {n} bytes at offset {start}, got {len(data)}"
            )
        return data

    def read_fourcc(self) -> bytes:
        return self.read_exact(4)

    def read_uint32(self) -> int:
        return struct.unpack("<I", self.read_exact(4))[0]

    def read_int32(self) -> int:
        return struct.unpack("<i", self.read_exact(4))[0]

    def read_struct(self, fmt: str) -> tuple:
        """Read and unpack one record of the given struct format."""
        return struct.unpack(fmt, self.read_exact(struct.calcsize(fmt)))

    def seek(self, offset: int) -> int:
        return self.stream.seek(offset, os.SEEK_SET)

    def skip(self, delta: int) -> int:
        return self.stream.seek(delta, os.SEEK_CUR)

    def tell(self) -> int:
        return self.stream.tell()

    def size(self) -> int:
        """Total stream length; the cursor is left where it was."""
        here = self.stream.tell()
        end = self.stream.seek(0, os.SEEK_END)
        self.stream.seek(here, os.SEEK_SET)
        return end

    def write_at(self, offset: int, data: bytes) -> None:
        """Write ``data`` at absolute ``offset``."""
        self.stream.seek(offset, os.SEEK_SET)
        written = self.stream.write(data)
        if written is not None and written != len(data):
            raise OSError(f"Short write at offset {offset}: {written} of {len(data)} bytes")
