"""Numeric bounds shared by request schemas and the pricing engine.

Every integer column is a 32-bit ``INTEGER``; values outside that range can
never match a row and cannot be stored.
"""

MAX_DB_INT = 2**31 - 1
MAX_QUANTITY = 1000
MAX_PRICE_CENTS = 10_000_000


def fits_db_int(value: int) -> bool:
    return 0 < value <= MAX_DB_INT
