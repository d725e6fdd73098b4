from .products import PRODUCT_GROUP_TABLES, PRODUCT_MODELS, ProductRecord, product_model_for
from .customers import Customer
from .orders import Order, OrderItem, ORDER_STATUSES, DEFAULT_ORDER_STATUS
from .expenses import Expense
from .users import Admin, ManagedUser
from .notifications import Notification, NOTIFICATION_NEW_ORDER

__all__ = [
    'PRODUCT_GROUP_TABLES', 'PRODUCT_MODELS', 'ProductRecord', 'product_model_for',
    'Customer',
    'Order', 'OrderItem', 'ORDER_STATUSES', 'DEFAULT_ORDER_STATUS',
    'Expense',
    'Admin', 'ManagedUser',
    'Notification', 'NOTIFICATION_NEW_ORDER',
]
