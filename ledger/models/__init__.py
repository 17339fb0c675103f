# ledger/models/__init__.py
from .checkout import CheckoutBook, CheckoutBase, ActiveCheckout, ArchivedCheckout, Checkout

__all__ = [
    'CheckoutBook',
    'CheckoutBase',
    'ActiveCheckout',
    'ArchivedCheckout',
    'Checkout'
]
