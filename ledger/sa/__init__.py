# ledger/sa/__init__.py
from .database import Database
from .models import (
    Base, Book, User, Checkout, ReturnedCheckout
)

__all__ = [
    'Database',
    'Base',
    'Book',
    'User',
    'Checkout',
    'ReturnedCheckout'
]
