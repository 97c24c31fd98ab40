"""
APIs REST del back-office
"""
from .seller_debts import bp as seller_debts_bp
from .dashboard import bp as dashboard_bp
from .statistics import bp as statistics_bp
from .users import bp as users_bp
from .couriers import bp as couriers_bp
from .orders import bp as orders_bp

__all__ = [
    "seller_debts_bp",
    "dashboard_bp",
    "statistics_bp",
    "users_bp",
    "couriers_bp",
    "orders_bp",
]
