"""
API: Estadísticas
Pedidos agrupados por vendedor y courier, con ingreso neto del admin
"""
from flask import Blueprint, jsonify, request, current_app
from ..services.reports import statistics_report
from ..utils.dates import get_date_range

bp = Blueprint("statistics", __name__)


@bp.route("", methods=["GET"])
def get_statistics():
    """Query params: userId, userRole (SELLER | COURIER), dateFrom, dateTo, search"""
    date_from, date_to = get_date_range(request.args, current_app.config["REPORT_UTC_OFFSET_HOURS"])

    user_id = request.args.get("userId", "").strip()
    try:
        user_id = int(user_id) if user_id else None
    except ValueError:
        user_id = None

    report = statistics_report(
        date_from,
        date_to,
        user_id=user_id,
        user_role=request.args.get("userRole"),
        search=request.args.get("search", "").strip() or None,
    )
    return jsonify(report)
