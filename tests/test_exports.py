from datetime import datetime, timedelta, timezone
from urllib.parse import unquote

from foodstand.exports import (
    csv_text,
    export_filename,
    format_currency,
    payment_tag,
    summary_text,
    whatsapp_link,
    write_history_csv,
)
from foodstand.models import CatalogItem, HistoryEntry, Order, OrderLine, PaymentStatus

TZ = timezone(timedelta(hours=-5))


def _order(name="Ana", paid=False, method="", reference="", phone="") -> Order:
    return Order(
        order_id="o-1",
        created_at=datetime(2024, 5, 17, 18, 5, 9, tzinfo=TZ),
        day_key="2024-05-17",
        lines=(
            OrderLine(CatalogItem("perro", "Perro Suizo", 10000), 2),
            OrderLine(CatalogItem("soda", "Gaseosa", 3000), 1),
        ),
        customer_name=name,
        phone=phone,
        payment_status=PaymentStatus.PAID if paid else PaymentStatus.UNPAID,
        payment_method=method,
        payment_reference=reference,
    )


def test_format_currency():
    assert format_currency(0) == "$ 0"
    assert format_currency(24000) == "$ 24.000"
    assert format_currency(1234567) == "$ 1.234.567"


def test_payment_tag():
    assert payment_tag(_order()) == "[PENDIENTE]"
    assert payment_tag(_order(paid=True, method="cash")) == "[PAGADO - cash]"
    assert payment_tag(_order(paid=True, method="nequi", reference="77")) == "[PAGADO - nequi - Ref:77]"


def test_summary_text_layout():
    orders = [_order(paid=True, method="nequi", reference="77"), _order(name="Luis")]

    lines = summary_text("2024-05-17", orders).split("\n")

    assert lines[0] == "Resumen 2024-05-17"
    assert lines[1] == "Total pedidos: 2"
    assert lines[2] == "Cobrado: $ 23.000 | Pendiente: $ 23.000 | Total: $ 46.000"
    assert lines[3] == ""
    assert lines[4] == "• Ana — 2x Perro Suizo, 1x Gaseosa ($ 23.000) [PAGADO - nequi - Ref:77]"
    assert lines[5] == "• Luis — 2x Perro Suizo, 1x Gaseosa ($ 23.000) [PENDIENTE]"


def test_whatsapp_link_strips_non_digits():
    link = whatsapp_link("Resumen 1 & 2", "+57 300-111 2233")
    assert link.startswith("https://wa.me/573001112233?text=")
    assert unquote(link.split("?text=", 1)[1]) == "Resumen 1 & 2"


def test_whatsapp_link_without_admin_phone():
    assert whatsapp_link("hola") == "https://wa.me/?text=hola"


def test_csv_quotes_free_text_only():
    entries = [
        HistoryEntry("2024-05-17", _order(name='Ana "la mona"', phone="300")),
        HistoryEntry("2024-05-16", _order(paid=True, method="cash")),
    ]
    expected_time = entries[0].order.created_at.astimezone().strftime("%H:%M:%S")

    rows = csv_text(entries).split("\n")

    assert rows[0] == "fecha,hora,cliente,telefono,items,total,estado"
    assert rows[1] == (
        f'2024-05-17,{expected_time},"Ana ""la mona""","300","2x Perro Suizo + 1x Gaseosa",23000,PENDIENTE'
    )
    assert rows[2].endswith(",23000,PAGADO")
    assert rows[2].startswith("2024-05-16,")


def test_csv_with_no_entries_is_header_only():
    assert csv_text([]) == "fecha,hora,cliente,telefono,items,total,estado"


def test_export_filename_sanitizes_customer():
    assert export_filename("recibo", "2024-05-17", "Ana María / 2") == "recibo_2024-05-17_Ana_Mar_a_2.png"
    assert export_filename("factura", "2024-05-17", "   ") == "factura_2024-05-17_cliente.png"


def test_write_history_csv(tmp_path):
    path = write_history_csv([HistoryEntry("2024-05-17", _order())], "h.csv", tmp_path / "out")
    assert path == tmp_path / "out" / "h.csv"
    assert path.read_text(encoding="utf-8").startswith("fecha,hora")
