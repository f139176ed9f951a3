"""Synthetic AVI files for the test suite."""

import struct
from dataclasses import dataclass

import pytest

KEY = 0x10


@dataclass
class BuiltAVI:
    data: bytes
    chunk_positions: list[int]  # Absolute offset of each movi chunk header
    movi_offset: int  # Offset of the 'movi' list type
    entries: list[tuple[bytes, int, int, int]]  # idx1 records as written


def chunk(fourcc: bytes, payload: bytes) -> bytes:
    data = fourcc + struct.pack("<I", len(payload)) + payload
    if len(payload) % 2 == 1:
        data += b"\x00"
    return data


def build_avi(
    frames: list[tuple[bytes, bytes, bool]],
    offsets: str = "relative",
    include_movi: bool = True,
    include_idx1: bool = True,
    extra_chunks: bytes = b"",
    magic: bytes = b"RIFF",
    form_type: bytes = b"AVI ",
    offset_overrides: dict[int, int] | None = None,
) -> BuiltAVI:
    """Assemble a minimal AVI file.

    Args:
        frames: (fourcc, payload, is_keyframe) for each movi chunk
        offsets: 'absolute', 'relative' (from the 'movi' tag) or
            'relative-data' (from the first chunk inside movi)
        include_movi: Emit the movi LIST
        include_idx1: Emit the idx1 chunk
        extra_chunks: Raw top-level chunks inserted between hdrl and movi
        magic: Outer chunk FOURCC
        form_type: RIFF form type
        offset_overrides: Replace the idx1 offset of the given frame numbers
    """
    hdrl = chunk(b"LIST", b"hdrl" + chunk(b"avih", b"\x00" * 56))
    body = hdrl + extra_chunks

    movi_offset = 12 + len(body) + 8
    chunk_positions = []
    movi_payload = b""
    for fourcc, payload, _ in frames:
        chunk_positions.append(movi_offset + 4 + len(movi_payload))
        movi_payload += chunk(fourcc, payload)

    if include_movi:
        body += chunk(b"LIST", b"movi" + movi_payload)

    entries = []
    for i, ((fourcc, payload, is_key), position) in enumerate(zip(frames, chunk_positions)):
        if offsets == "absolute":
            offset = position
        elif offsets == "relative":
            offset = position - movi_offset
        else:
            offset = position - movi_offset - 4
        if offset_overrides and i in offset_overrides:
            offset = offset_overrides[i]
        entries.append((fourcc, KEY if is_key else 0, offset, len(payload)))

    if include_idx1:
        index = b"".join(struct.pack("<4siii", *entry) for entry in entries)
        body += chunk(b"idx1", index)

    data = magic + struct.pack("<I", 4 + len(body)) + form_type + body
    return BuiltAVI(
        data=data,
        chunk_positions=chunk_positions,
        movi_offset=movi_offset,
        entries=entries,
    )


def keyframes(count: int, deltas_between: int = 1) -> list[tuple[bytes, bytes, bool]]:
    """``count`` key frames, each followed by ``deltas_between`` delta frames."""
    frames = []
    for i in range(count):
        frames.append((b"00dc", f"key-{i:02d}".encode() * 3, True))
        for j in range(deltas_between):
            frames.append((b"00dc", f"delta-{i:02d}-{j:02d}".encode(), False))
    return frames


@pytest.fixture
def avi_builder():
    return build_avi


@pytest.fixture
def write_avi(tmp_path):
    """Write a built AVI to disk and return (path, built)."""

    def _write(name: str = "input.avi", **kwargs):
        frames = kwargs.pop("frames", None) or keyframes(3)
        built = build_avi(frames, **kwargs)
        path = tmp_path / name
        path.write_bytes(built.data)
        return path, built

    return _write
