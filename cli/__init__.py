"""CLI package for the library checkout ledger"""
from .main import cli
from .commands.checkout import checkout

__all__ = ['cli', 'checkout']
