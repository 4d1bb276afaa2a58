from typing import Literal

from pydantic import BaseModel, Field, field_validator


class ImageInfo(BaseModel):
    """A requested variant: fit inside (or, with *crop*, fill) width x height."""

    kind:   str  = Field(min_length=1)
    width:  int  = Field(gt=0)
    height: int  = Field(gt=0)
    crop:   bool = False

    @field_validator("kind")
    @classmethod
    def kind_is_file_stem(cls, v: str) -> str:
        # kind becomes "<kind>.jpg" inside the work directory
        if "/" in v or "\\" in v or v in (".", ".."):
            raise ValueError("kind must be usable as a file name")
        return v

    @property
    def area(self) -> int:
        return self.width * self.height


class OutFileInfo(BaseModel):
    format:   Literal["jpeg"] = "jpeg"
    width:    int
    height:   int
    channels: int
    size:     int


class OutImageInfo(BaseModel):
    kind:      str
    format:    Literal["jpeg"] = "jpeg"
    width:     int
    height:    int
    file_path: str


class VariantOut(BaseModel):
    """A generated variant sent over HTTP; *data* is the base64-encoded JPEG."""

    kind:   str
    format: Literal["jpeg"] = "jpeg"
    width:  int
    height: int
    data:   str
