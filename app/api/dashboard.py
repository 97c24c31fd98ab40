"""
API: Dashboard
Contadores generales, ingresos (bruto y neto) y datos para gráficos
"""
from flask import Blueprint, jsonify, request, current_app
from ..services.reports import dashboard_report
from ..utils.dates import get_date_range

bp = Blueprint("dashboard", __name__)


@bp.route("", methods=["GET"])
def get_dashboard():
    """
    Query params: dateFrom/dateTo (también startDate/endDate).
    Nunca falla por una sección: lo que no se pudo calcular vuelve en cero.
    """
    config = current_app.config
    date_from, date_to = get_date_range(request.args, config["REPORT_UTC_OFFSET_HOURS"])

    report = dashboard_report(
        date_from,
        date_to,
        utc_offset_hours=config["REPORT_UTC_OFFSET_HOURS"],
        recent_limit=config["RECENT_ORDERS_LIMIT"],
        top_limit=config["TOP_PRODUCTS_LIMIT"],
    )
    return jsonify(report)
