"""Editable static product, payment and kitchen configuration."""

from __future__ import annotations

# Raw product rows consumed by foodstand.data (which wraps them into CatalogItem instances).
# Prices are whole Colombian pesos.
PRODUCTS: list[dict[str, str | int]] = [
    {"id": "perro_sencillo", "name": "Perro Sencillo", "price": 6000},
    {"id": "choriperro", "name": "Choriperro", "price": 9000},
    {"id": "perro_suizo", "name": "Perro Suizo", "price": 10000},
    {"id": "perro_mixto_S&S", "name": "Perro Mixto S&S", "price": 11000},
    {"id": "tocisuizo", "name": "Tocisuizo", "price": 12000},
    {"id": "italo_suizo", "name": "Italo Suizo", "price": 12000},
    {"id": "S&S_burguer", "name": "S&S Burguer", "price": 13000},
    {"id": "S&S_maxi_burguer", "name": "S&S Maxi Burguer", "price": 16000},
    {"id": "gaseosa", "name": "Gaseosa", "price": 3000},
    {"id": "combo_sencillo", "name": "Combo Sencillo", "price": 9000},
    {"id": "combo_tocisuizo", "name": "Combo Tocisuizo", "price": 15000},
    {"id": "combo_S&S_burguer", "name": "Combo S&S Burguer", "price": 16000},
]

NO_NAME = "Sin nombre"

PAYMENT_METHOD_CASH = "cash"
PAYMENT_METHOD_OTHER = "other"

# Known payment methods; "other" lets the cashier type any label.
PAYMENT_METHOD_LABELS: dict[str, str] = {
    "cash": "Efectivo",
    "nequi": "Nequi",
    "daviplata": "Daviplata",
    "bancolombia": "Bancolombia",
    "other": "Otro",
}

KITCHEN_LABELS: dict[str, str] = {
    "PENDING": "Sin iniciar",
    "PREPARING": "En preparación",
    "READY": "Entregado",
}

PAYMENT_LABELS: dict[str, str] = {
    "PAID": "PAGADO",
    "UNPAID": "PENDIENTE",
}

HISTORY_STATUS_FILTERS: tuple[str, ...] = ("all", "paid", "unpaid")

HISTORY_STATUS_LABELS: dict[str, str] = {
    "all": "Todos",
    "paid": "Pagados",
    "unpaid": "Pendientes",
}

CSV_HEADER: tuple[str, ...] = ("fecha", "hora", "cliente", "telefono", "items", "total", "estado")

RECEIPT_KINDS: dict[str, str] = {
    "recibo": "RECIBO",
    "factura": "FACTURA",
}

STAND_NAME = "S&S Burger"
