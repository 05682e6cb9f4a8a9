from .auth import User, UserRole, AuthToken
from .franchise import Franchise, Store
from .orders import MenuItem, DinerOrder, OrderItem
from .security import SecurityEvent

__all__ = [
    'User', 'UserRole', 'AuthToken',
    'Franchise', 'Store',
    'MenuItem', 'DinerOrder', 'OrderItem',
    'SecurityEvent',
]
