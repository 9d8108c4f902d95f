"""Runtime configuration defaults for storage, exports, logging and printing."""

from __future__ import annotations

import os

DB_PATH = os.environ.get("FOODSTAND_DB_PATH", "data/foodstand.db")
EXPORT_DIR = os.environ.get("FOODSTAND_EXPORT_DIR", "exports")
LOG_PATH = os.environ.get("FOODSTAND_LOG_PATH", "/tmp/foodstand-debug.log")

# Key-value slots inside the store.
LEDGER_STORAGE_KEY = "fastfood_orders_v2"
ADMIN_PHONE_STORAGE_KEY = "fastfood_whatsapp_admin"

WHATSAPP_BASE_URL = "https://wa.me/"

PRINTER_USB_VENDOR_ID = 0x28E9
PRINTER_USB_PRODUCT_ID = 0x0289
PRINTER_WIDTH_PX = 384
PRINTER_FONT_SIZE = 26
PRINTER_FONT_PATH = "/System/Library/Fonts/SFNS.ttf"
PRINTER_LEFT_INDENT_PX = 16
