"""
Servicio: Fuente de datos de pedidos para reportes
Una sola consulta por predicado de elegibilidad, para que el dashboard y
las deudas de vendedores nunca calculen sobre conjuntos distintos
"""
from sqlalchemy import or_, cast, String

from ..db import db
from ..models import Order, OrderItem, Product, User, SellerCommission
from .revenue_split import OrderLine


def _commission_query(seller_ids, as_of=None):
    query = SellerCommission.query.filter(SellerCommission.user_id.in_(seller_ids))
    if as_of is not None:
        query = query.filter(SellerCommission.created_at <= as_of)
    return query


def resolve_commission_rate(seller_id, as_of=None):
    """
    Tasa de comisión vigente de un vendedor.

    Es la del registro creado más recientemente (hasta as_of, si se indica).
    Sin registros la tasa es 0: el vendedor recibe el precio completo.
    """
    record = (
        _commission_query([seller_id], as_of)
        .order_by(SellerCommission.created_at.desc(), SellerCommission.id.desc())
        .first()
    )
    if record is None or record.rate is None:
        return 0.0
    return float(record.rate)


def resolve_commission_rates(seller_ids, as_of=None):
    """Igual que resolve_commission_rate pero para varios vendedores en una consulta"""
    ids = set(seller_ids)
    rates = {seller_id: 0.0 for seller_id in ids}
    if not ids:
        return rates

    records = (
        _commission_query(ids, as_of)
        .order_by(SellerCommission.created_at.asc(), SellerCommission.id.asc())
        .all()
    )
    # Orden ascendente: el último registro de cada vendedor queda al final
    for record in records:
        rates[record.user_id] = float(record.rate or 0)
    return rates


def _apply_updated_range(query, updated_from, updated_to):
    if updated_from is not None:
        query = query.filter(Order.updated_at >= updated_from)
    if updated_to is not None:
        query = query.filter(Order.updated_at <= updated_to)
    return query


def fetch_order_lines(statuses, updated_from=None, updated_to=None, seller_id=None, courier_id=None):
    """
    Líneas de pedido elegibles con la comisión del vendedor resuelta.

    Args:
        statuses: Estados de pedido a incluir (p. ej. ["DELIVERED"])
        updated_from / updated_to: Límites inclusivos sobre Order.updated_at
        seller_id: Solo líneas de productos de ese vendedor
        courier_id: Solo pedidos de ese courier

    Returns:
        list[OrderLine]
    """
    query = (
        db.session.query(
            OrderItem.order_id,
            OrderItem.product_id,
            OrderItem.amount,
            OrderItem.price,
            Product.seller_id,
            User.fullname,
            Order.updated_at,
        )
        .join(Order, OrderItem.order_id == Order.id)
        .join(Product, OrderItem.product_id == Product.id)
        .join(User, Product.seller_id == User.id)
        .filter(Order.status.in_(list(statuses)))
    )
    query = _apply_updated_range(query, updated_from, updated_to)

    if seller_id is not None:
        query = query.filter(Product.seller_id == seller_id)
    if courier_id is not None:
        query = query.filter(Order.courier_id == courier_id)

    rows = query.order_by(OrderItem.order_id, OrderItem.id).all()
    rates = resolve_commission_rates(row.seller_id for row in rows)

    return [
        OrderLine(
            order_id=row.order_id,
            seller_id=row.seller_id,
            quantity=row.amount or 0,
            unit_price=row.price or 0,
            commission_rate=rates.get(row.seller_id, 0.0),
            seller_name=row.fullname,
            product_id=row.product_id,
            updated_at=row.updated_at,
        )
        for row in rows
    ]


def fetch_orders(statuses, updated_from=None, updated_to=None, seller_id=None, courier_id=None, search=None):
    """
    Pedidos completos (con items) para los listados de estadísticas.
    Con seller_id se devuelven los pedidos que tienen al menos un producto
    de ese vendedor (incluye los items de otros vendedores del carrito).
    """
    query = Order.query.filter(Order.status.in_(list(statuses)))
    query = _apply_updated_range(query, updated_from, updated_to)

    if seller_id is not None:
        query = query.filter(
            Order.items.any(OrderItem.product.has(Product.seller_id == seller_id))
        )
    if courier_id is not None:
        query = query.filter(Order.courier_id == courier_id)

    if search:
        pattern = f"%{search}%"
        query = query.filter(
            or_(
                cast(Order.id, String).ilike(pattern),
                Order.customer_name.ilike(pattern),
                Order.customer_phone.ilike(pattern),
                Order.delivery_address.ilike(pattern),
            )
        )

    return query.order_by(Order.updated_at.desc()).all()
