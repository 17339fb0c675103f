# ledger/sa/models/__init__.py
from .base import Base, TimestampMixin, UTCDateTime, ensure_utc
from .user import User
from .book import Book
from .checkout import Checkout, ReturnedCheckout

__all__ = [
    'Base',
    'TimestampMixin',
    'UTCDateTime',
    'ensure_utc',
    'User',
    'Book',
    'Checkout',
    'ReturnedCheckout'
]
