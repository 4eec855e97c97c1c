"""Runtime configuration defaults for loading, reporting and printing."""

from __future__ import annotations

import os

PIZZAS_PATH = "App_Data/pizzas.json"
TOP_GROUP_LIMIT = 20
CURRENCY_SYMBOL = "$"
DEBUG_LOG_PATH = "/tmp/order-tally-debug.log"

PIZZAS_PATH_ENV = "ORDER_TALLY_PIZZAS_PATH"
DEBUG_LOG_ENV = "ORDER_TALLY_DEBUG_LOG"
PRINTER_DEVICE_ENV = "ORDER_TALLY_PRINTER_DEVICE"
PRINTER_FONT_ENV = "ORDER_TALLY_PRINTER_FONT"

# ESC/POS printers attached through the kernel usblp driver show up here.
PRINTER_DEVICE = "/dev/usb/lp0"
# 58 mm paper, 384 printable dots.
PRINTER_WIDTH_PX = 384
PRINTER_MARGIN_PX = 12
PRINTER_FONT_SIZE = 26
# Looked up in the system font directories by Pillow.
PRINTER_FONT = "DejaVuSans.ttf"


def _env_or(name: str, default: str) -> str:
    return os.environ.get(name, "").strip() or default


def pizzas_path() -> str:
    """Return the pizzas file path, honouring the environment override."""
    return _env_or(PIZZAS_PATH_ENV, PIZZAS_PATH)


def debug_log_path() -> str:
    """Return the debug log path, honouring the environment override."""
    return _env_or(DEBUG_LOG_ENV, DEBUG_LOG_PATH)


def printer_device() -> str:
    return _env_or(PRINTER_DEVICE_ENV, PRINTER_DEVICE)


def printer_font() -> str:
    return _env_or(PRINTER_FONT_ENV, PRINTER_FONT)
