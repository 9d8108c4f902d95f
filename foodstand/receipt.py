"""Receipt and invoice images, saved as PNG or sent to the thermal printer."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from PIL import Image, ImageDraw, ImageFont

from foodstand.aggregate import order_total
from foodstand.config import (
    EXPORT_DIR,
    PRINTER_FONT_PATH,
    PRINTER_FONT_SIZE,
    PRINTER_LEFT_INDENT_PX,
    PRINTER_USB_PRODUCT_ID,
    PRINTER_USB_VENDOR_ID,
    PRINTER_WIDTH_PX,
)
from foodstand.constant import PAYMENT_LABELS, RECEIPT_KINDS, STAND_NAME
from foodstand.exports import export_filename, format_currency
from foodstand.models import Order

logger = logging.getLogger(__name__)

_SEPARATOR = None
_LINE_GAP_PX = 6
_TOP_MARGIN_PX = 12
_BOTTOM_MARGIN_PX = 24
_SEPARATOR_HEIGHT_PX = 14
_SEPARATOR_THICKNESS_PX = 2
_FONT_OVERRIDE_ENV = "FOODSTAND_PRINTER_FONT_PATH"
_LINUX_FONT_FALLBACKS = (
    "/usr/share/fonts/TTF/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/noto/NotoSans-Regular.ttf",
    "/usr/share/fonts/liberation/LiberationSans-Regular.ttf",
)

# A row is (left text, right text) or _SEPARATOR.
ReceiptRow = tuple[str, str] | None


def resolve_font_path() -> str | None:
    """
    Resolve a receipt font path.

    Resolution order:
    1. FOODSTAND_PRINTER_FONT_PATH (if set)
    2. PRINTER_FONT_PATH
    3. Known Linux fallbacks
    """
    candidates: list[str] = []
    env_override = os.environ.get(_FONT_OVERRIDE_ENV, "").strip()
    if env_override:
        candidates.append(env_override)
    candidates.append(PRINTER_FONT_PATH)
    candidates.extend(_LINUX_FONT_FALLBACKS)

    seen: set[str] = set()
    for candidate in candidates:
        if not candidate or candidate in seen:
            continue
        seen.add(candidate)
        if Path(candidate).is_file():
            return candidate
    return None


def load_font(size: int = PRINTER_FONT_SIZE) -> ImageFont.ImageFont | ImageFont.FreeTypeFont:
    font_path = resolve_font_path()
    if font_path is None:
        logger.info("No TrueType font found; using Pillow's default font")
        return ImageFont.load_default()
    return ImageFont.truetype(font_path, size)


def receipt_rows(order: Order, kind: str = "recibo") -> list[ReceiptRow]:
    """Text rows of a receipt (``recibo``) or invoice (``factura``)."""
    if kind not in RECEIPT_KINDS:
        raise ValueError(f"Unknown receipt kind: {kind!r}")
    invoice = kind == "factura"

    rows: list[ReceiptRow] = [
        (STAND_NAME, ""),
        (RECEIPT_KINDS[kind], order.created_at.astimezone().strftime("%Y-%m-%d %H:%M")),
        (f"Cliente: {order.customer_name}", ""),
    ]
    if invoice and order.phone:
        rows.append((f"Tel: {order.phone}", ""))
    rows.append(_SEPARATOR)

    for line in order.lines:
        rows.append((f"{line.quantity}x {line.item.name}", format_currency(line.subtotal)))
        if invoice and line.quantity > 1:
            rows.append((f"    c/u {format_currency(line.item.unit_price)}", ""))

    rows.append(_SEPARATOR)
    rows.append(("TOTAL", format_currency(order_total(order))))
    if order.is_paid:
        status = PAYMENT_LABELS["PAID"]
        if order.payment_method:
            status = f"{status} - {order.payment_method}"
        rows.append((status, ""))
        if invoice and order.payment_reference:
            rows.append((f"Ref: {order.payment_reference}", ""))
    else:
        rows.append((PAYMENT_LABELS["UNPAID"], ""))
    if order.note:
        rows.append((f"Nota: {order.note}", ""))
    return rows


def _fit_text_to_px(text: str, draw: ImageDraw.ImageDraw, font: object, max_width_px: int) -> str:
    if draw.textbbox((0, 0), text, font=font)[2] <= max_width_px:
        return text
    ellipsis = "..."
    trimmed = text
    while trimmed:
        candidate = f"{trimmed}{ellipsis}"
        if draw.textbbox((0, 0), candidate, font=font)[2] <= max_width_px:
            return candidate
        trimmed = trimmed[:-1]
    return ellipsis


def render_receipt(order: Order, kind: str = "recibo", font: object | None = None) -> Image.Image:
    """Render the whole receipt into one 1-bit image sized for the printer width."""
    rows = receipt_rows(order, kind)
    font = font if font is not None else load_font()

    probe = Image.new("1", (1, 1), color=1)
    probe_draw = ImageDraw.Draw(probe)
    line_height = max(12, probe_draw.textbbox((0, 0), "Hg", font=font)[3]) + _LINE_GAP_PX
    usable_width = PRINTER_WIDTH_PX - (PRINTER_LEFT_INDENT_PX * 2)

    height = _TOP_MARGIN_PX + _BOTTOM_MARGIN_PX
    for row in rows:
        height += _SEPARATOR_HEIGHT_PX if row is _SEPARATOR else line_height

    img = Image.new("1", (PRINTER_WIDTH_PX, height), color=1)
    draw = ImageDraw.Draw(img)
    y = _TOP_MARGIN_PX
    for row in rows:
        if row is _SEPARATOR:
            top = y + (_SEPARATOR_HEIGHT_PX - _SEPARATOR_THICKNESS_PX) // 2
            draw.rectangle(
                (PRINTER_LEFT_INDENT_PX, top, PRINTER_WIDTH_PX - PRINTER_LEFT_INDENT_PX, top + _SEPARATOR_THICKNESS_PX - 1),
                fill=0,
            )
            y += _SEPARATOR_HEIGHT_PX
            continue

        left, right = row
        right_width = 0
        if right:
            right_bbox = draw.textbbox((0, 0), right, font=font)
            right_width = right_bbox[2] - right_bbox[0]
            draw.text((PRINTER_WIDTH_PX - PRINTER_LEFT_INDENT_PX - right_width - right_bbox[0], y), right, font=font, fill=0)
        left_room = usable_width - right_width - (12 if right else 0)
        draw.text((PRINTER_LEFT_INDENT_PX, y), _fit_text_to_px(left, draw, font, left_room), font=font, fill=0)
        y += line_height
    return img


def save_receipt_png(order: Order, kind: str = "recibo", directory: str | Path = EXPORT_DIR) -> Path:
    """Write ``<kind>_<day>_<customer>.png`` and return its path."""
    img = render_receipt(order, kind)
    target_dir = Path(directory)
    target_dir.mkdir(parents=True, exist_ok=True)
    path = target_dir / export_filename(kind, order.day_key, order.customer_name)
    img.save(path, format="PNG")
    logger.info("receipt_saved kind=%s order_id=%s path=%s", kind, order.order_id, path)
    return path


def check_printer_dependencies() -> tuple[bool, str]:
    """Check whether the thermal printer driver is importable."""
    try:
        from escpos.printer import Usb  # noqa: F401
    except Exception as exc:
        return (False, f"Printer deps unavailable: {exc}")
    return (True, "Printer ready")


def print_receipt(order: Order, kind: str = "recibo") -> None:
    """Send the receipt image to the USB thermal printer and cut the ticket."""
    try:
        from escpos.printer import Usb
    except Exception as exc:
        raise RuntimeError(f"Printer dependencies unavailable: {exc}") from exc

    img = render_receipt(order, kind)
    printer = Usb(PRINTER_USB_VENDOR_ID, PRINTER_USB_PRODUCT_ID)
    printer.image(img)
    printer.cut()
    logger.info("receipt_printed kind=%s order_id=%s", kind, order.order_id)
