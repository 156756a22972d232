# backend/generator/render_target.py
"""
Drawing surface used by the card layout.

The layout only talks to RenderTarget, so it does not care whether it draws
into a Pillow raster, a recording stub in tests or any other surface.
Coordinates are pixels, boxes are (x0, y0, x1, y1).
"""

from __future__ import annotations

import io
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional, Tuple

from PIL import Image, ImageDraw, ImageFont, ImageOps, UnidentifiedImageError, features

from core import config

logger = logging.getLogger("idcard-portal.render_target")

Box = Tuple[int, int, int, int]
Point = Tuple[int, int]

LATIN = "latin"
DEVANAGARI = "devanagari"


@dataclass(frozen=True)
class FontSpec:
    size: int
    bold: bool = False
    script: str = LATIN


class RenderTarget(ABC):
    """Minimal drawing capability needed to lay out a card side"""

    width: int
    height: int

    @abstractmethod
    def fill_rect(self, box: Box, color: str) -> None:
        ...

    @abstractmethod
    def outline_rect(self, box: Box, color: str, width: int = 2) -> None:
        ...

    @abstractmethod
    def line(self, start: Point, end: Point, color: str, width: int = 1) -> None:
        ...

    @abstractmethod
    def text(self, xy: Point, text: str, font: FontSpec, color: str = "black", anchor: str = "la") -> None:
        """Draws a single line of text; anchor uses Pillow's two-letter codes"""

    @abstractmethod
    def text_width(self, text: str, font: FontSpec) -> float:
        ...

    @abstractmethod
    def image(self, box: Box, data: Optional[bytes], fit: str = "contain") -> bool:
        """
        Draws an encoded image into box.

        Args:
            fit: "cover" crops to fill the box, "contain" keeps the whole
                image centred inside it

        Returns:
            False when there is no data or it cannot be decoded; the caller
            draws a placeholder instead
        """


# ------------------------- fonts ------------------------- #

def _font_path(spec: FontSpec) -> str:
    if spec.script == DEVANAGARI and config.DEVANAGARI_FONT_PATH:
        return config.DEVANAGARI_FONT_PATH
    if spec.bold and config.LATIN_BOLD_FONT_PATH:
        return config.LATIN_BOLD_FONT_PATH
    return config.LATIN_FONT_PATH


@lru_cache(maxsize=64)
def _load_font(path: str, size: int):
    if path and Path(path).exists():
        # Devanagari needs complex shaping, available only through raqm
        engine = ImageFont.Layout.RAQM if features.check("raqm") else ImageFont.Layout.BASIC
        return ImageFont.truetype(path, size, layout_engine=engine)
    if path:
        logger.warning(f"⚠️ Font not found: {path}, using Pillow default font")
    return ImageFont.load_default(size=size)


def load_font(spec: FontSpec):
    return _load_font(_font_path(spec), spec.size)


# ------------------------- Pillow raster ------------------------- #

def decode_image(data: bytes) -> Image.Image:
    """Decodes image bytes into an RGB image, flattening transparency onto white"""
    img = Image.open(io.BytesIO(data))
    img.load()
    img = ImageOps.exif_transpose(img)
    if img.mode in ("RGBA", "LA", "P"):
        img = img.convert("RGBA")
        background = Image.new("RGB", img.size, "white")
        background.paste(img, mask=img.getchannel("A"))
        return background
    return img.convert("RGB")


class PillowRenderTarget(RenderTarget):
    """Raster target backed by a Pillow RGB image"""

    def __init__(self, width: int, height: int, background: str = "white"):
        self.width = width
        self.height = height
        self.canvas = Image.new("RGB", (width, height), background)
        self._draw = ImageDraw.Draw(self.canvas)

    def fill_rect(self, box: Box, color: str) -> None:
        self._draw.rectangle(box, fill=color)

    def outline_rect(self, box: Box, color: str, width: int = 2) -> None:
        self._draw.rectangle(box, outline=color, width=width)

    def line(self, start: Point, end: Point, color: str, width: int = 1) -> None:
        self._draw.line([start, end], fill=color, width=width)

    def text(self, xy: Point, text: str, font: FontSpec, color: str = "black", anchor: str = "la") -> None:
        self._draw.text(xy, text, fill=color, font=load_font(font), anchor=anchor)

    def text_width(self, text: str, font: FontSpec) -> float:
        return self._draw.textlength(text, font=load_font(font))

    def image(self, box: Box, data: Optional[bytes], fit: str = "contain") -> bool:
        if not data:
            return False

        try:
            img = decode_image(data)
        except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError) as ex:
            logger.warning(f"⚠️ Cannot decode image for box {box}: {ex}")
            return False

        x0, y0, x1, y1 = box
        size = (max(1, x1 - x0), max(1, y1 - y0))

        if fit == "cover":
            img = ImageOps.fit(img, size)
            self.canvas.paste(img, (x0, y0))
        else:
            img = ImageOps.contain(img, size)
            offset = (x0 + (size[0] - img.width) // 2, y0 + (size[1] - img.height) // 2)
            self.canvas.paste(img, offset)
        return True
