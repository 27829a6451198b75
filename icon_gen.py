"""Generate the system-tray icon (64×64 PIL Image, in-memory)."""

from datetime import date

from PIL import Image, ImageDraw, ImageFont

HEADER_COLOR = "#2563EB"


def _fit_font(draw: ImageDraw.ImageDraw, text: str, max_w: int, max_h: int):
    """Return the largest font that fits *text* into the given box."""
    font_size = 60
    while font_size > 10:
        try:
            font = ImageFont.truetype("DejaVuSans-Bold.ttf", font_size)
        except OSError:
            return ImageFont.load_default()
        bbox = draw.textbbox((0, 0), text, font=font)
        if bbox[2] - bbox[0] <= max_w and bbox[3] - bbox[1] <= max_h:
            return font
        font_size -= 1
    return font


def create_icon_image(today: date | None = None, badge: int = 0) -> Image.Image:
    """Return a 64×64 RGBA calendar tile showing today's day of month.

    A non-zero *badge* (appointments today) adds a red dot in the corner.
    """
    size = 64
    header_h = 16
    today = today or date.today()
    text = str(today.day)

    img = Image.new("RGBA", (size, size), (0, 0, 0, 0))
    draw = ImageDraw.Draw(img)
    draw.rectangle((0, 0, size - 1, size - 1), fill="white", outline=HEADER_COLOR)
    draw.rectangle((0, 0, size - 1, header_h), fill=HEADER_COLOR)

    font = _fit_font(draw, text, size - 8, size - header_h - 8)
    # Centre the visible pixels below the header (compensate for font metric offsets)
    bbox = draw.textbbox((0, 0), text, font=font)
    x = (size - (bbox[2] - bbox[0])) / 2 - bbox[0]
    y = header_h + (size - header_h - (bbox[3] - bbox[1])) / 2 - bbox[1]
    draw.text((x, y), text, fill="black", font=font)

    if badge > 0:
        draw.ellipse((size - 18, 2, size - 4, header_h), fill="#EF4444")

    return img
