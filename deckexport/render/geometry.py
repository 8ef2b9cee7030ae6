"""Drawing helpers shared by the header and the layout engines."""

from __future__ import annotations

from dataclasses import dataclass

from PIL import Image

Point = tuple[float, float]

CURVE_STEPS = 8


def _quad_curve(start: Point, control: Point, end: Point, steps: int = CURVE_STEPS) -> list[Point]:
    """Sample a quadratic Bezier curve, excluding the start point."""
    points = []
    for i in range(1, steps + 1):
        t = i / steps
        u = 1 - t
        x = u * u * start[0] + 2 * u * t * control[0] + t * t * end[0]
        y = u * u * start[1] + 2 * u * t * control[1] + t * t * end[1]
        points.append((x, y))
    return points


def rounded_rect_path(x: float, y: float, w: float, h: float, r: float) -> list[Point]:
    """Closed outline of a rounded rectangle, clockwise from the top edge.

    The radius is clamped to half the shorter side, so ``r = h / 2``
    gives a pill shape.
    """
    radius = max(0.0, min(r, h / 2, w / 2))
    path: list[Point] = [(x + radius, y), (x + w - radius, y)]
    path += _quad_curve((x + w - radius, y), (x + w, y), (x + w, y + radius))
    path.append((x + w, y + h - radius))
    path += _quad_curve((x + w, y + h - radius), (x + w, y + h), (x + w - radius, y + h))
    path.append((x + radius, y + h))
    path += _quad_curve((x + radius, y + h), (x, y + h), (x, y + h - radius))
    path.append((x, y + radius))
    path += _quad_curve((x, y + radius), (x, y), (x + radius, y))
    # Drop the closing duplicate of the first point
    return path[:-1]


def text_width(font, text: str) -> float:
    """Advance width of ``text`` in ``font``, in px."""
    return font.getlength(text)


@dataclass(frozen=True, slots=True)
class ChipBox:
    """Measured geometry of one header chip."""

    width: float
    height: float
    text_block_width: float
    padding: float
    icon_box: float

    @property
    def radius(self) -> float:
        return self.height / 2


def measure_chip(
    label_width: float,
    count_width: float,
    height: float,
    padding: float,
    inner_gap: float,
    icon_box: float,
) -> ChipBox:
    """Size a chip around its text block and icon box."""
    text_block = max(label_width, count_width)
    width = padding + text_block + inner_gap + icon_box + padding
    return ChipBox(
        width=width,
        height=height,
        text_block_width=text_block,
        padding=padding,
        icon_box=icon_box,
    )


def fit_image(image: Image.Image, w: float, h: float) -> Image.Image:
    """``image`` as RGBA at ``w x h`` px, resampled only when needed."""
    size = (max(1, round(w)), max(1, round(h)))
    if image.size != size:
        image = image.resize(size, Image.Resampling.LANCZOS)
    if image.mode != "RGBA":
        image = image.convert("RGBA")
    return image


def draw_image(canvas: Image.Image, image: Image.Image, x: float, y: float, w: float, h: float) -> None:
    """Scale ``image`` to ``w x h`` and alpha-composite it at ``(x, y)``.

    Parts falling outside the canvas are clipped.
    """
    image = fit_image(image, w, h)

    left, top = round(x), round(y)
    if left >= canvas.width or top >= canvas.height or -left >= image.width or -top >= image.height:
        return
    if left < 0 or top < 0:
        image = image.crop((max(0, -left), max(0, -top), image.width, image.height))
        left, top = max(0, left), max(0, top)
    canvas.alpha_composite(image, dest=(left, top))
