# backend/generator/card_renderer.py
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from PIL import Image

from generator.card_layout import CardContent, card_pixel_size, draw_back, draw_front
from generator.render_target import PillowRenderTarget, RenderTarget

logger = logging.getLogger("idcard-portal.card_renderer")

FRONT = "front"
BACK = "back"

_SIDES = {
    FRONT: draw_front,
    BACK: draw_back,
}


@dataclass
class CardImages:
    front: Image.Image
    back: Image.Image


def render_side(content: CardContent, side: str, dpi: Optional[int] = None) -> Image.Image:
    """
    Rasterizes one face of the card.

    Args:
        side: "front" or "back"
        dpi: overrides CARD_DPI (previews use a lower resolution)

    Raises:
        ValueError: unknown side
    """
    draw: Optional[Callable[[RenderTarget, CardContent], None]] = _SIDES.get(side)
    if draw is None:
        raise ValueError(f"Unknown card side: {side}")

    width, height = card_pixel_size(dpi)
    target = PillowRenderTarget(width, height)
    draw(target, content)
    logger.info(f"Card {side} rendered: {width}x{height}px")
    return target.canvas


def render_card(content: CardContent, dpi: Optional[int] = None) -> CardImages:
    return CardImages(
        front=render_side(content, FRONT, dpi),
        back=render_side(content, BACK, dpi),
    )
