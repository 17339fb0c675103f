# ledger/sa/repositories/__init__.py
from .book import BookRepository
from .checkout import CheckoutRepository

__all__ = ['BookRepository', 'CheckoutRepository']
