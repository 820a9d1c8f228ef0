"""Types shared by the terrain builders: mesh style, load options and height maps."""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass

from PIL import Image

MAX_HEIGHT_VALUE = 0xFFFF

_SIXTEEN_BIT_FORMATS = {
    "I;16": "<{}H",
    "I;16L": "<{}H",
    "I;16B": ">{}H",
    "I": "={}i",
}


class MeshStyle(enum.Enum):
    """How the terrain mesh is drawn."""

    SHADED = "Shaded"
    WIREFRAME = "Wireframe"


DEFAULT_MESH_STYLE = MeshStyle.WIREFRAME


@dataclass
class TerrainImageLoadOptions:
    """Scaling applied when a height map becomes a mesh."""

    max_image_height: float = 20.0
    pixel_side_length: float = 1.0


@dataclass(frozen=True)
class HeightMap:
    """A 16-bit grayscale image stored row by row."""

    width: int
    height: int
    pixels: tuple[int, ...]

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError(f"invalid height map size {self.width}x{self.height}")
        if len(self.pixels) != self.width * self.height:
            raise ValueError(
                f"height map of {self.width}x{self.height} needs "
                f"{self.width * self.height} pixels, got {len(self.pixels)}"
            )
        for value in self.pixels:
            if not 0 <= value <= MAX_HEIGHT_VALUE:
                raise ValueError(f"pixel value {value} is not a 16-bit value")

    @classmethod
    def from_values(cls, width: int, height: int, values) -> HeightMap:
        """Build a height map from row-major values; extra values are ignored."""
        values = tuple(values)
        needed = width * height
        if len(values) < needed:
            raise ValueError(
                f"height map of {width}x{height} needs {needed} values, got {len(values)}"
            )
        return cls(width, height, values[:needed])

    @classmethod
    def open(cls, filename) -> HeightMap:
        """Load a 16-bit grayscale image file."""
        with Image.open(filename) as image:
            mode = image.mode
            width, height = image.size
            raw = image.tobytes()
        layout = _SIXTEEN_BIT_FORMATS.get(mode)
        if layout is None:
            raise ValueError(f"{filename}: expected a 16-bit grayscale image, got mode {mode}")
        return cls(width, height, struct.unpack(layout.format(width * height), raw))

    def get_pixel(self, x: int, y: int) -> int:
        """Return the raw value at column ``x``, row ``y``."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(
                f"pixel ({x}, {y}) is outside a {self.width}x{self.height} height map"
            )
        return self.pixels[y * self.width + x]

    def normalized(self, x: int, y: int) -> float:
        """Return the value at ``(x, y)`` scaled to the range 0..1."""
        return self.get_pixel(x, y) / MAX_HEIGHT_VALUE