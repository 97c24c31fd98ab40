"""
API: Couriers
Lista de couriers activos (para filtros y asignación de pedidos)
"""
from flask import Blueprint, jsonify
from ..models import User

bp = Blueprint("couriers", __name__)


@bp.route("", methods=["GET"])
def get_couriers():
    """Couriers activos ordenados por nombre"""
    couriers = (
        User.query.filter_by(role="COURIER", status="ACTIVE")
        .order_by(User.fullname)
        .all()
    )
    return jsonify([
        {"id": c.id, "fullname": c.fullname, "phoneNumber": c.phone_number}
        for c in couriers
    ])
