from .catalog import Category, Supplier, Product
from .auth import User, VALID_ROLES
from .transactions import Transaction, VALID_TRANSACTION_TYPES, VALID_TRANSACTION_STATUSES

__all__ = [
    'Category', 'Supplier', 'Product',
    'User', 'VALID_ROLES',
    'Transaction', 'VALID_TRANSACTION_TYPES', 'VALID_TRANSACTION_STATUSES',
]
