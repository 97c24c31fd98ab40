"""
API: Deudas con vendedores
Cuánto se le debe a cada vendedor por pedidos entregados (filtrado por updated_at)
"""
from flask import Blueprint, jsonify, request, current_app
from ..services.reports import seller_debts_report
from ..utils.dates import get_date_range

bp = Blueprint("seller_debts", __name__)


def _int_arg(name):
    """Lee un id entero de los query params; inválido = sin filtro"""
    value = request.args.get(name, "").strip()
    try:
        return int(value) if value else None
    except ValueError:
        return None


@bp.route("", methods=["GET"])
def get_seller_debts():
    """
    Deudas por vendedor y resumen global
    Query params: dateFrom, dateTo (ISO-8601), sellerId
    Un sellerId no numérico se ignora y se devuelven todos los vendedores.
    """
    date_from, date_to = get_date_range(request.args, current_app.config["REPORT_UTC_OFFSET_HOURS"])
    seller_id = _int_arg("sellerId")

    report = seller_debts_report(date_from, date_to, seller_id)
    return jsonify(report)
