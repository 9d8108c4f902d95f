from datetime import datetime, timedelta, timezone

import pytest
from PIL import ImageFont

from foodstand.config import PRINTER_USB_PRODUCT_ID, PRINTER_USB_VENDOR_ID, PRINTER_WIDTH_PX
from foodstand.models import CatalogItem, Order, OrderLine, PaymentStatus
from foodstand.receipt import print_receipt, receipt_rows, render_receipt, save_receipt_png

TZ = timezone(timedelta(hours=-5))


def _order(**overrides) -> Order:
    values = dict(
        order_id="o-1",
        created_at=datetime(2024, 5, 17, 18, 5, tzinfo=TZ),
        day_key="2024-05-17",
        lines=(
            OrderLine(CatalogItem("perro", "Perro Suizo", 10000), 2),
            OrderLine(CatalogItem("soda", "Gaseosa", 3000), 1),
        ),
        customer_name="Ana",
        phone="3001112233",
        note="sin cebolla",
    )
    values.update(overrides)
    return Order(**values)


def _texts(rows) -> list[str]:
    return [row[0] for row in rows if row is not None]


def test_receipt_rows_for_unpaid_order():
    rows = receipt_rows(_order())
    texts = _texts(rows)

    assert "RECIBO" in texts
    assert "Cliente: Ana" in texts
    assert ("2x Perro Suizo", "$ 20.000") in rows
    assert ("TOTAL", "$ 23.000") in rows
    assert "PENDIENTE" in texts
    assert "Nota: sin cebolla" in texts
    assert "Tel: 3001112233" not in texts


def test_invoice_adds_phone_unit_price_and_reference():
    order = _order(payment_status=PaymentStatus.PAID, payment_method="nequi", payment_reference="R-9")
    texts = _texts(receipt_rows(order, "factura"))

    assert "FACTURA" in texts
    assert "Tel: 3001112233" in texts
    assert "    c/u $ 10.000" in texts
    assert "PAGADO - nequi" in texts
    assert "Ref: R-9" in texts


def test_unknown_kind_is_rejected():
    with pytest.raises(ValueError):
        receipt_rows(_order(), "ticket")


def test_render_receipt_fits_printer_width():
    img = render_receipt(_order(), font=ImageFont.load_default())
    assert img.width == PRINTER_WIDTH_PX
    assert img.height > 100
    # Black text on white paper.
    assert img.mode == "1"
    assert img.convert("L").getextrema() == (0, 255)


def test_save_receipt_png(tmp_path):
    path = save_receipt_png(_order(customer_name="Ana María"), "factura", tmp_path)
    assert path.name == "factura_2024-05-17_Ana_Mar_a.png"
    assert path.read_bytes()[:8] == b"\x89PNG\r\n\x1a\n"


class _RecordingPrinter:
    instances: list["_RecordingPrinter"] = []

    def __init__(self, vendor_id, product_id):
        self.ids = (vendor_id, product_id)
        self.calls = []
        _RecordingPrinter.instances.append(self)

    def image(self, img):
        self.calls.append(("image", img))

    def cut(self):
        self.calls.append(("cut", None))


def test_print_receipt_sends_image_then_cuts(monkeypatch):
    pytest.importorskip("escpos.printer")
    _RecordingPrinter.instances = []
    monkeypatch.setattr("escpos.printer.Usb", _RecordingPrinter)
    monkeypatch.setattr("foodstand.receipt.load_font", lambda *args, **kwargs: ImageFont.load_default())

    print_receipt(_order(), "factura")

    [printer] = _RecordingPrinter.instances
    assert printer.ids == (PRINTER_USB_VENDOR_ID, PRINTER_USB_PRODUCT_ID)
    assert [name for name, _ in printer.calls] == ["image", "cut"]
    img = printer.calls[0][1]
    assert img.mode == "1"
    assert img.width == PRINTER_WIDTH_PX
