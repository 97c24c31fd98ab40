"""
API: Staff (vendedores, couriers, administradores)
CRUD + historial de comisiones de vendedores
"""
import math
import traceback
from flask import Blueprint, request, jsonify
from ..db import db
from ..models import User, SellerCommission
from ..models.user import USER_ROLES, USER_STATUSES
from ..utils.dates import utcnow

bp = Blueprint("users", __name__)


def parse_commission_rate(value):
    """
    Valida una tasa de comisión.

    Returns:
        tuple: (rate, error). rate es float >= 0 o None si hay error.
    """
    if isinstance(value, bool):
        return None, "commissionRate debe ser un número"
    try:
        rate = float(value)
    except (TypeError, ValueError):
        return None, "commissionRate debe ser un número"
    if not math.isfinite(rate):
        return None, "commissionRate debe ser un número finito"
    if rate < 0:
        return None, "commissionRate no puede ser negativa"
    return rate, None


def _add_commission(user, rate):
    commission = SellerCommission(user_id=user.id, rate=rate, created_at=utcnow())
    db.session.add(commission)
    return commission


@bp.route("", methods=["GET"])
def get_users():
    """Lista el staff (filtros: role, status, search)"""
    role = request.args.get("role", "").strip().upper()
    status = request.args.get("status", "").strip().upper()
    search = request.args.get("search", "").strip()

    query = User.query

    if role:
        query = query.filter_by(role=role)
    if status:
        query = query.filter_by(status=status)
    if search:
        query = query.filter(
            db.or_(
                User.fullname.ilike(f"%{search}%"),
                User.phone_number.ilike(f"%{search}%")
            )
        )

    users = query.order_by(User.fullname).all()
    return jsonify([u.to_dict() for u in users])


@bp.route("/<int:id>", methods=["GET"])
def get_user(id):
    """Obtiene un usuario con su historial de comisiones"""
    user = db.get_or_404(User, id)
    return jsonify(user.to_dict(include_history=True))


@bp.route("", methods=["POST"])
def create_user():
    """Crea un usuario. Si es vendedor y trae commissionRate, se registra la comisión"""
    data = request.json or {}

    fullname = (data.get("fullname") or "").strip()
    phone_number = (data.get("phoneNumber") or "").strip()
    role = (data.get("role") or "SELLER").strip().upper()

    if not fullname:
        return jsonify({"error": "El nombre es requerido"}), 400
    if not phone_number:
        return jsonify({"error": "El teléfono es requerido"}), 400
    if role not in USER_ROLES:
        return jsonify({"error": f"role debe ser uno de: {', '.join(USER_ROLES)}"}), 400

    rate = None
    if role == "SELLER" and data.get("commissionRate") is not None:
        rate, error = parse_commission_rate(data["commissionRate"])
        if error:
            return jsonify({"error": error}), 400

    if User.query.filter_by(phone_number=phone_number).first():
        return jsonify({"error": "Ya existe un usuario con ese teléfono"}), 400

    try:
        user = User(fullname=fullname, phone_number=phone_number, role=role, status="ACTIVE")
        db.session.add(user)
        db.session.flush()

        if rate is not None:
            _add_commission(user, rate)

        db.session.commit()
        return jsonify(user.to_dict(include_history=True)), 201
    except Exception as e:
        db.session.rollback()
        print(f"❌ Error creando usuario: {e}")
        traceback.print_exc()
        return jsonify({"error": f"Error al crear usuario: {str(e)}"}), 500


@bp.route("/<int:id>", methods=["PUT"])
def update_user(id):
    """
    Actualiza un usuario.
    Un commissionRate distinto al vigente agrega un registro nuevo al
    historial (nunca se modifica uno existente).
    """
    user = db.get_or_404(User, id)
    data = request.json or {}

    if "phoneNumber" in data:
        phone_number = (data.get("phoneNumber") or "").strip()
        if not phone_number:
            return jsonify({"error": "El teléfono es requerido"}), 400
        existing = User.query.filter(User.phone_number == phone_number, User.id != id).first()
        if existing:
            return jsonify({"error": "Ya existe otro usuario con ese teléfono"}), 400
        user.phone_number = phone_number

    if "fullname" in data:
        fullname = (data.get("fullname") or "").strip()
        if not fullname:
            return jsonify({"error": "El nombre es requerido"}), 400
        user.fullname = fullname

    if "role" in data:
        role = (data.get("role") or "").strip().upper()
        if role not in USER_ROLES:
            return jsonify({"error": f"role debe ser uno de: {', '.join(USER_ROLES)}"}), 400
        user.role = role

    if "status" in data:
        status = (data.get("status") or "").strip().upper()
        if status not in USER_STATUSES:
            return jsonify({"error": f"status debe ser uno de: {', '.join(USER_STATUSES)}"}), 400
        user.status = status

    rate = None
    if data.get("commissionRate") is not None and user.role == "SELLER":
        rate, error = parse_commission_rate(data["commissionRate"])
        if error:
            return jsonify({"error": error}), 400

    try:
        current = user.current_commission
        if rate is not None and (current is None or current.rate != rate):
            _add_commission(user, rate)

        user.updated_at = utcnow()
        db.session.commit()
        return jsonify(user.to_dict(include_history=True))
    except Exception as e:
        db.session.rollback()
        print(f"❌ Error actualizando usuario: {e}")
        traceback.print_exc()
        return jsonify({"error": f"Error al actualizar usuario: {str(e)}"}), 500


@bp.route("/<int:id>", methods=["DELETE"])
def delete_user(id):
    """Desactiva un usuario (sus pedidos y comisiones se conservan para los reportes)"""
    user = db.get_or_404(User, id)
    user.status = "INACTIVE"
    user.updated_at = utcnow()
    db.session.commit()

    return jsonify({"message": "Usuario desactivado"})


@bp.route("/<int:id>/commissions", methods=["GET"])
def get_commissions(id):
    """Historial de comisiones, la más reciente primero"""
    user = db.get_or_404(User, id)
    return jsonify([c.to_dict() for c in user.commission_history])


@bp.route("/<int:id>/commissions", methods=["POST"])
def add_commission(id):
    """Registra una nueva tasa de comisión para un vendedor"""
    user = db.get_or_404(User, id)
    data = request.json or {}

    if user.role != "SELLER":
        return jsonify({"error": "Solo los vendedores tienen comisión"}), 400

    rate, error = parse_commission_rate(data.get("rate", data.get("commissionRate")))
    if error:
        return jsonify({"error": error}), 400

    commission = _add_commission(user, rate)
    db.session.commit()

    return jsonify(commission.to_dict()), 201
