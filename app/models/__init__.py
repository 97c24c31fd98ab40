"""
Modelos de base de datos
Staff, catálogo, pedidos y comisiones de vendedores
"""
from .category import Category
from .product import Product
from .user import User
from .commission import SellerCommission
from .order import Order
from .order_item import OrderItem
from .order_audit import OrderAudit

__all__ = [
    "Category",
    "Product",
    "User",
    "SellerCommission",
    "Order",
    "OrderItem",
    "OrderAudit",
]
