"""Record parser — turns a CSV payload into products, all or nothing."""

from __future__ import annotations

import csv
import io

from pydantic import ValidationError

from productsync.core.exceptions import ParseError
from productsync.models.product import Product

PRODUCT_COLUMNS = ("id", "name", "image", "price", "quantity")
REQUIRED_COLUMNS = ("id", "name", "price", "quantity")
NUMERIC_COLUMNS = ("price", "quantity")


def _decode(data: bytes | str) -> str:
    if isinstance(data, str):
        return data.lstrip("\ufeff")
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise ParseError(f"payload is not valid UTF-8: {exc}") from exc


def _header_index(header: list[str]) -> dict[str, int]:
    """Map known product fields to their column positions."""
    index: dict[str, int] = {}
    for pos, raw in enumerate(header):
        name = raw.strip().lower()
        if name in PRODUCT_COLUMNS and name not in index:
            index[name] = pos
    missing = [col for col in REQUIRED_COLUMNS if col not in index]
    if missing:
        raise ParseError(f"missing header column(s): {', '.join(missing)}", row=0)
    return index


def parse_rows(data: bytes | str) -> list[tuple[int, Product]]:
    """Parse the whole payload into (row, product) pairs in file order.

    Rows are 1-based CSV records after the header; blank records are
    skipped but still counted, so numbers match the file.

    Raises:
        ParseError: the payload is empty of a header, a row is ragged, or a
            numeric cell cannot be converted. Nothing is returned on failure.
    """
    reader = csv.reader(io.StringIO(_decode(data), newline=""))
    try:
        header = next(reader, None)
        if header is None:
            raise ParseError("empty payload, header row expected", row=0)
        index = _header_index(header)

        products: list[tuple[int, Product]] = []
        for row_no, row in enumerate(reader, start=1):
            if not any(cell.strip() for cell in row):
                continue
            if len(row) != len(header):
                raise ParseError(
                    f"expected {len(header)} fields, got {len(row)}", row=row_no,
                )
            fields = {name: row[pos].strip() for name, pos in index.items()}
            # Blank numeric cells fall back to zero
            for col in NUMERIC_COLUMNS:
                if not fields[col]:
                    del fields[col]
            try:
                products.append((row_no, Product(**fields)))
            except ValidationError as exc:
                bad = ", ".join(str(e["loc"][0]) for e in exc.errors())
                raise ParseError(f"unparseable value for {bad}", row=row_no) from exc
    except csv.Error as exc:
        raise ParseError(str(exc), row=reader.line_num) from exc
    return products


def parse_products(data: bytes | str) -> list[Product]:
    """Parse the whole payload into products in file order."""
    return [product for _, product in parse_rows(data)]
