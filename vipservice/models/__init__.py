from .account import Account, Quote

__all__ = ['Account', 'Quote']
