"""Pydantic schema for YAML patch settings."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PatchConfig(BaseModel):
    """How key frames are selected and blanked."""

    keep_first: bool = True  # False blanks every key frame; the output may not decode
    replacement: str = "JUNK"  # FOURCC written over each targeted chunk
    keyframe_flag: int = Field(default=0x10, gt=0)  # idx1 flag bit for key frames
    offset_mode: Literal["auto", "absolute", "relative"] = "auto"

    model_config = ConfigDict(extra="forbid")

    @field_validator("replacement")
    @classmethod
    def _check_fourcc(cls, value: str) -> str:
        if len(value) != 4 or not value.isascii():
            raise ValueError(f"replacement must be 4 ASCII characters, got {value!r}")
        return value

    @property
    def replacement_bytes(self) -> bytes:
        return self.replacement.encode("ascii")

    def patch_kwargs(self) -> dict:
        """Keyword arguments for ``patch_keyframes`` and ``plan_patches``."""
        return {
            "keep_first": self.keep_first,
            "replacement": self.replacement_bytes,
            "keyframe_flag": self.keyframe_flag,
            "offset_mode": self.offset_mode,
        }
