"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

DEFAULT_INVOICE_DUE_DAYS = 10
DEFAULT_INVOICE_NUMBER_START = 1000
INVOICE_NUMBER_PREFIX = "INV-"

CENT = Decimal("0.01")
ZERO = Decimal("0")

DEFAULT_TRANSACTION_LIMIT = 200
