from PIL import Image, ImageDraw, ImageFont
from datetime import datetime
from pathlib import Path
from typing import Optional

from . import config

# -----------------------------
# Page (A4 at 150 dpi)
# -----------------------------
PAGE_W, PAGE_H = 1240, 1754
RESOLUTION = 150.0
MARGIN_X = 140
TOP = 180
LINE_GAP = 26

INK = (20, 20, 20)
RULE = (120, 120, 120)

FOOTER = "This certificate is system generated."


def font(size: int):
    try:
        return ImageFont.truetype("DejaVuSans.ttf", size)
    except OSError:
        return ImageFont.load_default(size=size)


def certificate_path(record_id: int) -> Path:
    return Path(config.CERT_DIR) / f"cert_{record_id}.pdf"


def _fmt_when(value: Optional[datetime]) -> str:
    if not value:
        return "-"
    return value.strftime("%Y-%m-%d %H:%M")


def certificate_lines(record: dict) -> list:
    return [
        f"Patient: {record.get('patient_name') or '-'}",
        f"Vaccine: {record.get('vaccine_name') or '-'}",
        f"Dose No: {record.get('dose_no') or '-'}",
        f"Given On: {_fmt_when(record.get('given_on'))}",
        f"Given By: {record.get('staff_name') or '-'}",
    ]


def render_certificate(record: dict) -> Image.Image:
    page = Image.new("RGB", (PAGE_W, PAGE_H), "white")
    draw = ImageDraw.Draw(page)

    title_font = font(56)
    body_font = font(32)

    title = "Vaccination Certificate"
    tw = draw.textlength(title, font=title_font)
    draw.text(((PAGE_W - tw) / 2, TOP), title, fill=INK, font=title_font)
    y = TOP + 56 + 2 * LINE_GAP
    draw.line((MARGIN_X, y, PAGE_W - MARGIN_X, y), fill=RULE, width=2)
    y += 2 * LINE_GAP

    for line in certificate_lines(record):
        draw.text((MARGIN_X, y), line, fill=INK, font=body_font)
        y += 32 + LINE_GAP

    y += 2 * LINE_GAP
    draw.text((MARGIN_X, y), FOOTER, fill=INK, font=body_font)
    return page


def write_certificate(record: dict) -> Path:
    """Render and store ``cert_<id>.pdf``, replacing any earlier copy.

    Returns once the file is closed, so it can be served immediately.
    """
    path = certificate_path(record["id"])
    path.parent.mkdir(parents=True, exist_ok=True)
    page = render_certificate(record)
    page.save(path, format="PDF", resolution=RESOLUTION)
    return path
