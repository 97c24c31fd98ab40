"""
Servicio: Reparto de ingresos entre vendedor y plataforma

El precio al cliente ya trae la comisión del admin aplicada de forma
multiplicativa:

    precio = base_vendedor * (1 + comision / 100)

Por eso la parte del vendedor se recupera dividiendo por (1 + comision/100),
no restando un porcentaje del total. Ejemplo: 1100 con 10% -> base 1000,
ganancia admin 100.

Todo es puro: sin base de datos ni estado. Los montos se acumulan sin
redondear y se redondean a 2 decimales una sola vez, por vendedor.
"""
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

CENT = Decimal("0.01")
ZERO = Decimal("0")
HUNDRED = Decimal("100")


def to_decimal(value):
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    # str() evita arrastrar el error binario del float
    return Decimal(str(value))


def round_money(value):
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class OrderLine:
    """Una línea de pedido lista para repartir"""
    order_id: int
    seller_id: int
    quantity: int
    unit_price: float
    commission_rate: float = 0.0
    seller_name: str = ""
    product_id: Optional[int] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class LineSplit:
    item_total: Decimal
    base_price: Decimal
    admin_profit: Decimal


@dataclass(frozen=True)
class SellerDebtEntry:
    seller_id: int
    seller_name: str
    commission_rate: float
    total_revenue: Decimal
    total_debt: Decimal
    admin_profit: Decimal
    orders_count: int

    def to_dict(self):
        return {
            "sellerId": self.seller_id,
            "sellerName": self.seller_name,
            "totalDebt": float(self.total_debt),
            "totalRevenue": float(self.total_revenue),
            "adminProfit": float(self.admin_profit),
            "commissionRate": self.commission_rate,
            "ordersCount": self.orders_count,
        }


@dataclass(frozen=True)
class RevenueTotals:
    total_revenue: Decimal = ZERO
    total_debt: Decimal = ZERO
    admin_profit: Decimal = ZERO
    sellers_count: int = 0
    orders_count: int = 0

    def to_summary_dict(self):
        return {
            "totalDebt": float(self.total_debt),
            "totalRevenue": float(self.total_revenue),
            "totalAdminProfit": float(self.admin_profit),
            "sellersCount": self.sellers_count,
            "ordersCount": self.orders_count,
        }


def split_line(unit_price, quantity, commission_rate=0):
    """
    Separa el total de una línea en base del vendedor y ganancia del admin.

    Args:
        unit_price: Precio unitario cobrado (con comisión incluida)
        quantity: Unidades vendidas
        commission_rate: Porcentaje de comisión del vendedor (None = 0)

    Returns:
        LineSplit: montos sin redondear
    """
    item_total = to_decimal(unit_price) * to_decimal(quantity)
    admin_fraction = to_decimal(commission_rate) / HUNDRED

    if admin_fraction > 0:
        base_price = item_total / (1 + admin_fraction)
    else:
        base_price = item_total

    return LineSplit(
        item_total=item_total,
        base_price=base_price,
        admin_profit=item_total - base_price,
    )


def aggregate_by_seller(lines):
    """
    Agrupa las líneas por vendedor.

    adminProfit se deriva de los totales ya redondeados, así
    totalRevenue == totalDebt + adminProfit se cumple exacto.

    Returns:
        list[SellerDebtEntry]: ordenada por deuda (mayor a menor) y nombre
    """
    accumulators = {}

    for line in lines:
        split = split_line(line.unit_price, line.quantity, line.commission_rate)

        acc = accumulators.get(line.seller_id)
        if acc is None:
            acc = accumulators[line.seller_id] = {
                "seller_name": line.seller_name,
                "commission_rate": float(line.commission_rate or 0),
                "revenue": ZERO,
                "debt": ZERO,
                "orders": set(),
            }

        acc["revenue"] += split.item_total
        acc["debt"] += split.base_price
        acc["orders"].add(line.order_id)

    entries = []
    for seller_id, acc in accumulators.items():
        total_revenue = round_money(acc["revenue"])
        total_debt = round_money(acc["debt"])
        entries.append(SellerDebtEntry(
            seller_id=seller_id,
            seller_name=acc["seller_name"],
            commission_rate=acc["commission_rate"],
            total_revenue=total_revenue,
            total_debt=total_debt,
            admin_profit=total_revenue - total_debt,
            orders_count=len(acc["orders"]),
        ))

    entries.sort(key=lambda e: (-e.total_debt, e.seller_name or "", str(e.seller_id)))
    return entries


def summarize(entries, lines):
    """Totales globales como suma de los totales por vendedor"""
    total_revenue = sum((e.total_revenue for e in entries), ZERO)
    total_debt = sum((e.total_debt for e in entries), ZERO)

    return RevenueTotals(
        total_revenue=total_revenue,
        total_debt=total_debt,
        admin_profit=total_revenue - total_debt,
        sellers_count=len(entries),
        orders_count=len({line.order_id for line in lines}),
    )


def aggregate_totals(lines):
    """Totales globales (ingreso bruto, deuda con vendedores, ganancia neta)"""
    lines = list(lines)
    return summarize(aggregate_by_seller(lines), lines)


def gross_revenue(lines):
    """Suma bruta precio * cantidad, sin repartir (p. ej. pedidos cancelados)"""
    total = sum((split_line(line.unit_price, line.quantity).item_total for line in lines), ZERO)
    return round_money(total)
