"""Reading products from pipe-separated files."""

from __future__ import annotations

import csv
import os
import re

from ragshop.models import Product

_INT_RE = re.compile(r"[+-]?[0-9]+")
_FIELD_COUNT = 7


def _parse_int(text: str) -> int:
    return int(text) if _INT_RE.fullmatch(text) else 0


def _parse_float(text: str) -> float:
    if not text or text != text.strip() or "_" in text:
        return 0.0
    try:
        return float(text)
    except ValueError:
        return 0.0


def _row_to_product(row: list[str]) -> Product:
    return Product(
        id=row[0],
        name=row[1],
        description=row[2],
        price=_parse_float(row[3]),
        price_currency=row[4],
        supply_ability=_parse_int(row[5]),
        minimum_order=_parse_int(row[6]),
    )


def load_products_csv(filename: str | os.PathLike[str]) -> list[Product]:
    """Load products from a '|'-separated file with a header line.

    Rows with fewer than seven fields are skipped; unparsable numbers become zero.
    """
    with open(filename, newline="", encoding="utf-8") as handle:
        rows = [row for row in csv.reader(handle, delimiter="|", strict=True) if row]

    return [_row_to_product(row) for row in rows[1:] if len(row) >= _FIELD_COUNT]