"""
Servicio: Reportes financieros
Deudas con vendedores, dashboard y estadísticas. Todos usan la misma fuente
de líneas (order_source) y el mismo reparto (revenue_split).

Cada sección se calcula aislada: si la base de datos falla en una, esa
sección vuelve en cero/vacía y el resto del reporte sigue disponible.
"""
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from ..db import db
from ..models import Category, Order, OrderItem, Product, User
from ..models.order import ACTIVE_STATUSES, CANCELED, DELIVERED
from ..utils.dates import build_buckets, find_bucket
from .order_source import fetch_order_lines, fetch_orders
from .revenue_split import (
    ZERO,
    RevenueTotals,
    aggregate_by_seller,
    aggregate_totals,
    gross_revenue,
    round_money,
    split_line,
    summarize,
)


def _safe_section(name, builder, default):
    try:
        return builder()
    except SQLAlchemyError as e:
        db.session.rollback()
        print(f"⚠️  Error calculando sección '{name}': {e}")
        return default() if callable(default) else default


def _money(value):
    return float(round_money(value))


def _item_total(item):
    return split_line(item.price, item.amount).item_total


def _orders_in_range(date_from, date_to):
    query = Order.query
    if date_from is not None:
        query = query.filter(Order.updated_at >= date_from)
    if date_to is not None:
        query = query.filter(Order.updated_at <= date_to)
    return query


# ==================== DEUDAS CON VENDEDORES ====================

def empty_seller_debts_report():
    return {"sellerDebts": [], "summary": RevenueTotals().to_summary_dict()}


def seller_debts_report(date_from=None, date_to=None, seller_id=None):
    """
    Cuánto se le debe a cada vendedor por pedidos entregados.

    Returns:
        dict: {"sellerDebts": [...], "summary": {...}}
    """
    def build():
        lines = fetch_order_lines([DELIVERED], date_from, date_to, seller_id=seller_id)
        entries = aggregate_by_seller(lines)
        totals = summarize(entries, lines)
        return {
            "sellerDebts": [entry.to_dict() for entry in entries],
            "summary": totals.to_summary_dict(),
        }

    return _safe_section("seller_debts", build, empty_seller_debts_report)


# ==================== DASHBOARD ====================

def _catalog_counts():
    return {
        "totalProducts": Product.query.count(),
        "activeProducts": Product.query.filter_by(status="ACTIVE").count(),
        "totalCategories": Category.query.count(),
    }


def _order_counts(date_from, date_to):
    orders = _orders_in_range(date_from, date_to)
    return {
        "totalOrders": orders.count(),
        "pendingOrders": orders.filter(Order.status == "CREATED").count(),
    }


def _user_counts():
    return {
        "totalUsers": User.query.count(),
        "totalCouriers": User.query.filter_by(role="COURIER", status="ACTIVE").count(),
        "totalSellers": User.query.filter_by(role="SELLER", status="ACTIVE").count(),
    }


def revenue_overview(date_from=None, date_to=None):
    """Ingreso bruto entregado y ganancia neta del admin para el período"""
    def build():
        totals = aggregate_totals(fetch_order_lines([DELIVERED], date_from, date_to))
        return {
            "totalRevenue": float(totals.total_revenue),
            "netRevenue": float(totals.admin_profit),
            "deliveredOrders": totals.orders_count,
        }

    return _safe_section(
        "revenue",
        build,
        {"totalRevenue": 0.0, "netRevenue": 0.0, "deliveredOrders": 0},
    )


def _timeline(date_from, date_to, utc_offset_hours, grouping=None):
    """Ingresos entregados, cancelados (solo informativo) y pedidos por tramo"""
    buckets = build_buckets(date_from, date_to, utc_offset_hours, grouping)
    if not buckets:
        return []

    delivered = [[] for _ in buckets]
    canceled = [[] for _ in buckets]
    orders_count = [0 for _ in buckets]

    for line in fetch_order_lines([DELIVERED], date_from, date_to):
        index = find_bucket(buckets, line.updated_at)
        if index is not None:
            delivered[index].append(line)

    for line in fetch_order_lines([CANCELED], date_from, date_to):
        index = find_bucket(buckets, line.updated_at)
        if index is not None:
            canceled[index].append(line)

    for (updated_at,) in _orders_in_range(date_from, date_to).with_entities(Order.updated_at):
        index = find_bucket(buckets, updated_at)
        if index is not None:
            orders_count[index] += 1

    return [
        {
            "label": bucket["label"],
            "revenue": float(gross_revenue(delivered[i])),
            "canceledRevenue": float(gross_revenue(canceled[i])),
            "orders": orders_count[i],
        }
        for i, bucket in enumerate(buckets)
    ]


def _daily_orders(date_from, date_to, utc_offset_hours):
    return [
        {"date": row["label"], "orders": row["orders"], "revenue": row["revenue"]}
        for row in _timeline(date_from, date_to, utc_offset_hours, grouping="day")
    ]


def _order_status(date_from, date_to):
    stats = {}
    for order in _orders_in_range(date_from, date_to).all():
        entry = stats.setdefault(order.status, {"count": 0, "revenue": ZERO})
        entry["count"] += 1
        entry["revenue"] += sum((_item_total(item) for item in order.items), ZERO)

    return [
        {"status": status, "count": entry["count"], "revenue": _money(entry["revenue"])}
        for status, entry in sorted(stats.items(), key=lambda kv: -kv[1]["count"])
    ]


def _top_products(date_from, date_to, limit):
    sold = func.sum(OrderItem.amount)
    query = (
        db.session.query(
            Product.name,
            sold.label("sold"),
            func.sum(OrderItem.amount * OrderItem.price).label("revenue"),
        )
        .join(OrderItem, OrderItem.product_id == Product.id)
        .join(Order, OrderItem.order_id == Order.id)
    )
    if date_from is not None:
        query = query.filter(Order.updated_at >= date_from)
    if date_to is not None:
        query = query.filter(Order.updated_at <= date_to)

    rows = query.group_by(Product.id, Product.name).order_by(sold.desc(), Product.name).limit(limit).all()
    return [
        {"name": row.name, "sold": int(row.sold or 0), "revenue": _money(row.revenue or 0)}
        for row in rows
    ]


def _categories():
    result = []
    for category in Category.query.order_by(Category.name).all():
        if not category.products:
            continue
        items = [item for product in category.products for item in product.order_items]
        result.append({
            "name": category.name,
            "products": len(category.products),
            "orders": len(items),
            "revenue": _money(sum((_item_total(item) for item in items), ZERO)),
        })
    return result


def _recent_orders(date_from, date_to, limit):
    orders = _orders_in_range(date_from, date_to).order_by(Order.updated_at.desc()).limit(limit).all()
    return [
        {
            "id": order.id,
            "orderNumber": f"ORD-{order.id:06d}",
            "customerName": order.customer_name,
            "totalPrice": _money(sum((_item_total(item) for item in order.items), ZERO)),
            "status": order.status,
            "createdAt": order.created_at.isoformat() if order.created_at else None,
            "itemsCount": len(order.items),
            "courierName": order.courier.fullname if order.courier else None,
        }
        for order in orders
    ]


def dashboard_report(date_from=None, date_to=None, utc_offset_hours=0, recent_limit=5, top_limit=5):
    """
    Resumen del dashboard. Los gráficos por período solo se generan cuando
    vienen ambas fechas.
    """
    overview = {}
    overview.update(_safe_section(
        "catalog", _catalog_counts,
        {"totalProducts": 0, "activeProducts": 0, "totalCategories": 0},
    ))
    overview.update(_safe_section(
        "orders", lambda: _order_counts(date_from, date_to),
        {"totalOrders": 0, "pendingOrders": 0},
    ))
    overview.update(_safe_section(
        "users", _user_counts,
        {"totalUsers": 0, "totalCouriers": 0, "totalSellers": 0},
    ))
    revenue = revenue_overview(date_from, date_to)
    overview["totalRevenue"] = revenue["totalRevenue"]
    overview["netRevenue"] = revenue["netRevenue"]

    has_range = date_from is not None and date_to is not None
    charts = {
        "revenueTimeline": _safe_section(
            "revenue_timeline",
            lambda: _timeline(date_from, date_to, utc_offset_hours) if has_range else [],
            list,
        ),
        "dailyOrders": _safe_section(
            "daily_orders",
            lambda: _daily_orders(date_from, date_to, utc_offset_hours) if has_range else [],
            list,
        ),
        "orderStatus": _safe_section("order_status", lambda: _order_status(date_from, date_to), list),
        "topProducts": _safe_section("top_products", lambda: _top_products(date_from, date_to, top_limit), list),
        "categories": _safe_section("categories", _categories, list),
    }

    return {
        "overview": overview,
        "charts": charts,
        "recentOrders": _safe_section(
            "recent_orders", lambda: _recent_orders(date_from, date_to, recent_limit), list
        ),
    }


# ==================== ESTADÍSTICAS ====================

def _empty_statistics():
    return {
        "statistics": {
            "totalOrders": 0,
            "totalRevenue": 0.0,
            "deliveredRevenue": 0.0,
            "netRevenue": 0.0,
            "sellerDebt": 0.0,
            "sellerStats": [],
            "courierStats": [],
        },
        "orders": [],
    }


def statistics_report(date_from=None, date_to=None, user_id=None, user_role=None, search=None):
    """
    Estadísticas por vendedor y courier.

    Sin rol se listan todos los pedidos no cancelados; con rol SELLER o
    COURIER solo los entregados. Los montos netos (deuda, ganancia admin)
    siempre salen solo de pedidos entregados.
    """
    role = (user_role or "").upper()
    statuses = [DELIVERED] if role in ("SELLER", "COURIER") else list(ACTIVE_STATUSES)
    seller_id = user_id if role == "SELLER" else None
    courier_id = user_id if role == "COURIER" else None

    def build():
        orders = fetch_orders(statuses, date_from, date_to, seller_id, courier_id, search)

        total_revenue = ZERO
        seller_stats = {}
        courier_stats = {}
        processed = []

        for order in orders:
            order_total = ZERO
            groups = {}
            for item in order.items:
                item_total = _item_total(item)
                order_total += item_total
                item_seller_id = item.product.seller_id
                if seller_id is not None and item_seller_id != seller_id:
                    continue
                group = groups.setdefault(item_seller_id, {"seller": item.product.seller, "total": ZERO})
                group["total"] += item_total

            for group_seller_id, group in groups.items():
                stat = seller_stats.setdefault(group_seller_id, {
                    "seller": {"id": group["seller"].id, "fullname": group["seller"].fullname},
                    "totalRevenue": ZERO,
                    "totalOrders": 0,
                    "orders": [],
                })
                stat["totalRevenue"] += group["total"]
                stat["totalOrders"] += 1
                stat["orders"].append({
                    "orderId": order.id,
                    "total": _money(group["total"]),
                    "status": order.status,
                })

            if order.courier is not None:
                stat = courier_stats.setdefault(order.courier.id, {
                    "courier": {"id": order.courier.id, "fullname": order.courier.fullname},
                    "totalRevenue": ZERO,
                    "totalOrders": 0,
                    "orders": [],
                })
                stat["totalRevenue"] += order_total
                stat["totalOrders"] += 1
                stat["orders"].append({
                    "orderId": order.id,
                    "total": _money(order_total),
                    "status": order.status,
                })

            if seller_id is not None:
                total_revenue += sum((g["total"] for g in groups.values()), ZERO)
            else:
                total_revenue += order_total

            order_dict = order.to_dict()
            order_dict["totalPrice"] = _money(order_total)
            order_dict["items"] = [item.to_dict() for item in order.items]
            processed.append(order_dict)

        for stat in list(seller_stats.values()) + list(courier_stats.values()):
            stat["totalRevenue"] = _money(stat["totalRevenue"])

        listed_ids = {order.id for order in orders}
        lines = [
            line for line in fetch_order_lines([DELIVERED], date_from, date_to, seller_id, courier_id)
            if line.order_id in listed_ids
        ]
        totals = aggregate_totals(lines)

        return {
            "statistics": {
                "totalOrders": len(orders),
                "totalRevenue": _money(total_revenue),
                "deliveredRevenue": float(totals.total_revenue),
                "netRevenue": float(totals.admin_profit),
                "sellerDebt": float(totals.total_debt),
                "sellerStats": list(seller_stats.values()),
                "courierStats": list(courier_stats.values()),
            },
            "orders": processed,
        }

    return _safe_section("statistics", build, _empty_statistics)
