# ABOUTME: Draws the fallback "template" cover with Pillow: gradient, border, glyph, text.
# ABOUTME: Also owns the display-text rules (truncation, unknown author) shared with composition.

from dataclasses import dataclass

from PIL import Image, ImageDraw, ImageFont

ELLIPSIS = "..."


@dataclass(frozen=True)
class TemplateStyle:
    """Visual constants for template covers and cover pages."""

    gradient_start: str = "#667eea"
    gradient_end: str = "#764ba2"
    text_color: str = "#ffffff"
    accent_alpha: int = 90
    title_limit: int = 25
    author_limit: int = 30
    unknown_author: str = "Unknown Author"
    footer: str = "Digital Library"
    title_size: int = 34
    author_size: int = 24
    footer_size: int = 18
    margin: int = 24
    dot_count: int = 4


@dataclass(frozen=True)
class TemplateText:
    """The exact strings rendered onto a template cover."""

    title: str
    author: str
    footer: str


def truncate_text(text: str, limit: int) -> str:
    """Cut text to `limit` characters, marking the cut with an ellipsis.

    Text at or under the limit is returned unchanged.
    """
    if len(text) <= limit:
        return text
    return text[:limit] + ELLIPSIS


def template_text(title: str, author: str | None, style: TemplateStyle | None = None) -> TemplateText:
    """Compute the display lines for a title/author pair."""
    style = style or TemplateStyle()
    name = (author or "").strip() or style.unknown_author
    return TemplateText(
        title=truncate_text(title.strip(), style.title_limit),
        author=truncate_text(f"by {name}", style.author_limit),
        footer=style.footer,
    )


def hex_to_rgb(value: str) -> tuple[int, int, int]:
    value = value.lstrip("#")
    return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)


def blend(start: tuple[int, int, int], end: tuple[int, int, int], t: float) -> tuple[int, int, int]:
    """Linear interpolation between two RGB colors, t in [0, 1]."""
    return (
        round(start[0] + (end[0] - start[0]) * t),
        round(start[1] + (end[1] - start[1]) * t),
        round(start[2] + (end[2] - start[2]) * t),
    )


def _draw_gradient(image: Image.Image, style: TemplateStyle) -> None:
    """Diagonal gradient from the top-left to the bottom-right corner."""
    width, height = image.size
    start, end = hex_to_rgb(style.gradient_start), hex_to_rgb(style.gradient_end)
    draw = ImageDraw.Draw(image)
    span = width + height
    for offset in range(span):
        color = blend(start, end, offset / span)
        draw.line([(offset, 0), (offset - height, height)], fill=color, width=2)


def _centered(
    draw: ImageDraw.ImageDraw,
    width: int,
    y: float,
    text: str,
    font: ImageFont.FreeTypeFont | ImageFont.ImageFont,
    fill: str,
) -> None:
    left, top, right, bottom = draw.textbbox((0, 0), text, font=font)
    draw.text(((width - (right - left)) / 2 - left, y - (bottom - top) / 2 - top), text, font=font, fill=fill)


def render_template_cover(
    title: str,
    author: str | None,
    width: int = 600,
    height: int = 900,
    style: TemplateStyle | None = None,
) -> tuple[Image.Image, TemplateText]:
    """Draw a template cover.

    Args:
        title: Book title, truncated for display.
        author: Book author; empty renders the unknown-author line.
        width: Canvas width in pixels.
        height: Canvas height in pixels.
        style: Colors, limits and font sizes.

    Returns:
        The RGB cover image and the text lines drawn on it.
    """
    style = style or TemplateStyle()
    text = template_text(title, author, style)

    image = Image.new("RGB", (width, height))
    _draw_gradient(image, style)

    overlay = Image.new("RGBA", (width, height), (0, 0, 0, 0))
    accent = (255, 255, 255, style.accent_alpha)
    odraw = ImageDraw.Draw(overlay)
    m = style.margin
    odraw.rounded_rectangle((m, m, width - m, height - m), radius=18, outline=accent, width=3)

    # Book glyph: two pages and a spine.
    cx, gy = width / 2, height * 0.24
    gw, gh = width * 0.18, height * 0.1
    odraw.rectangle((cx - gw, gy - gh / 2, cx - 4, gy + gh / 2), fill=accent)
    odraw.rectangle((cx + 4, gy - gh / 2, cx + gw, gy + gh / 2), fill=accent)
    odraw.line([(cx, gy - gh / 2 - 6), (cx, gy + gh / 2 + 6)], fill=(255, 255, 255, 200), width=3)

    # Decorative dots and divider.
    dot_y, dot_r, gap = height * 0.66, 5, 22
    first_x = cx - gap * (style.dot_count - 1) / 2
    for i in range(style.dot_count):
        x = first_x + i * gap
        odraw.ellipse((x - dot_r, dot_y - dot_r, x + dot_r, dot_y + dot_r), fill=accent)
    odraw.line([(width * 0.3, height * 0.72), (width * 0.7, height * 0.72)], fill=accent, width=2)

    image = Image.alpha_composite(image.convert("RGBA"), overlay)
    draw = ImageDraw.Draw(image)
    _centered(draw, width, height * 0.44, text.title, ImageFont.load_default(size=style.title_size), style.text_color)
    _centered(draw, width, height * 0.54, text.author, ImageFont.load_default(size=style.author_size), style.text_color)
    _centered(draw, width, height - m - 36, text.footer, ImageFont.load_default(size=style.footer_size), style.text_color)

    return image.convert("RGB"), text
