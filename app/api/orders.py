"""
API: Pedidos
Listado, detalle y cambios de estado / courier / comentarios.
Todo cambio actualiza updated_at, que es la fecha que usan los reportes,
y deja un registro en el historial del pedido (OrderAudit).
"""
import traceback
from flask import Blueprint, request, jsonify, current_app
from ..db import db
from ..models import Order, OrderAudit, User
from ..models.order import (
    ORDER_STATUSES, CREATED, COURIER_WAIT, DELIVERED, CANCELED, CANCELABLE_STATUSES
)
from ..utils.dates import get_date_range, utcnow

bp = Blueprint("orders", __name__)

DEFAULT_CANCEL_COMMENT = "Pedido cancelado por el administrador"


def _audit_value(value):
    return None if value is None else str(value)


def _record_change(order, action, old_value, new_value):
    """Agrega un registro al historial si el valor cambió"""
    if old_value == new_value:
        return None
    audit = OrderAudit(
        order_id=order.id,
        action=action,
        old_value=_audit_value(old_value),
        new_value=_audit_value(new_value),
        created_at=utcnow(),
    )
    db.session.add(audit)
    return audit


def _set_field(order, field, action, value):
    _record_change(order, action, getattr(order, field), value)
    setattr(order, field, value)


@bp.route("", methods=["GET"])
def get_orders():
    """Lista pedidos (filtros: status, courierId, dateFrom, dateTo sobre updated_at)"""
    status = request.args.get("status", "").strip().upper()
    courier_id = request.args.get("courierId", "").strip()
    date_from, date_to = get_date_range(request.args, current_app.config["REPORT_UTC_OFFSET_HOURS"])

    query = Order.query

    if status:
        query = query.filter_by(status=status)
    if courier_id.isdigit():
        query = query.filter_by(courier_id=int(courier_id))
    if date_from is not None:
        query = query.filter(Order.updated_at >= date_from)
    if date_to is not None:
        query = query.filter(Order.updated_at <= date_to)

    orders = query.order_by(Order.updated_at.desc()).all()
    return jsonify([order.to_dict() for order in orders])


@bp.route("/<int:id>", methods=["GET"])
def get_order(id):
    """Obtiene un pedido con todos sus items"""
    order = db.get_or_404(Order, id)

    order_dict = order.to_dict()
    order_dict["items"] = [item.to_dict() for item in order.items]
    return jsonify(order_dict)


@bp.route("/<int:id>/status", methods=["PUT"])
def update_order_status(id):
    """
    Cambia el estado de un pedido.
    CANCELED es terminal; un pedido DELIVERED solo puede pasar a CANCELED.
    Al cancelar se guarda cancelComment (o un motivo por defecto).
    """
    order = db.get_or_404(Order, id)
    data = request.json or {}
    status = (data.get("status") or "").strip().upper()

    if status not in ORDER_STATUSES:
        return jsonify({"error": f"status debe ser uno de: {', '.join(ORDER_STATUSES)}"}), 400

    if order.status == CANCELED:
        return jsonify({"error": "No se puede modificar un pedido cancelado"}), 400

    if order.status == DELIVERED and status != CANCELED:
        return jsonify({"error": "Un pedido entregado solo puede cancelarse"}), 400

    if status == order.status:
        return jsonify(order.to_dict())

    try:
        _set_field(order, "status", "status", status)
        if status == CANCELED:
            comment = (data.get("cancelComment") or "").strip() or DEFAULT_CANCEL_COMMENT
            _set_field(order, "cancel_comment", "cancelComment", comment)
        order.updated_at = utcnow()
        db.session.commit()
        return jsonify(order.to_dict())
    except Exception as e:
        db.session.rollback()
        print(f"❌ Error actualizando estado del pedido {id}: {e}")
        traceback.print_exc()
        return jsonify({"error": f"Error al actualizar pedido: {str(e)}"}), 500


@bp.route("/<int:id>/cancel", methods=["POST"])
def cancel_order(id):
    """Cancela un pedido aún no recogido por el courier (requiere motivo)"""
    order = db.get_or_404(Order, id)
    data = request.json or {}
    comment = (data.get("cancelComment") or "").strip()

    if order.status not in CANCELABLE_STATUSES:
        return jsonify({
            "error": "Solo se pueden cancelar pedidos en estado CREATED o COURIER_WAIT"
        }), 400

    if not comment:
        return jsonify({"error": "Se debe indicar el motivo de la cancelación"}), 400

    _set_field(order, "status", "status", CANCELED)
    _set_field(order, "cancel_comment", "cancelComment", comment)
    order.updated_at = utcnow()
    db.session.commit()

    return jsonify({
        "success": True,
        "order": order.to_dict(),
        "message": "Pedido cancelado",
    })


@bp.route("/<int:id>/transfer-to-courier", methods=["POST"])
def transfer_to_courier(id):
    """Pasa un pedido CREATED a COURIER_WAIT, opcionalmente con adminComment"""
    order = db.get_or_404(Order, id)
    data = request.json or {}
    admin_comment = (data.get("adminComment") or "").strip()

    if order.status != CREATED:
        return jsonify({"error": "Solo se pueden pasar a courier pedidos en estado CREATED"}), 400

    _set_field(order, "status", "status", COURIER_WAIT)
    if admin_comment:
        _set_field(order, "admin_comment", "adminComment", admin_comment)
    order.updated_at = utcnow()
    db.session.commit()

    return jsonify({
        "success": True,
        "order": order.to_dict(),
        "message": "Pedido pasado a courier",
    })


@bp.route("/<int:id>/admin-comment", methods=["PUT"])
def update_admin_comment(id):
    """Edita (o borra, con adminComment vacío) el comentario de un pedido en COURIER_WAIT"""
    order = db.get_or_404(Order, id)
    data = request.json or {}
    admin_comment = (data.get("adminComment") or "").strip() or None

    if order.status != COURIER_WAIT:
        return jsonify({
            "error": "El comentario solo se puede editar en pedidos en estado COURIER_WAIT"
        }), 400

    _set_field(order, "admin_comment", "adminComment", admin_comment)
    order.updated_at = utcnow()
    db.session.commit()

    return jsonify({
        "success": True,
        "order": order.to_dict(),
        "message": "Comentario actualizado",
    })


@bp.route("/<int:id>/courier", methods=["PUT"])
def assign_courier(id):
    """Asigna (o quita, con courierId null) el courier de un pedido"""
    order = db.get_or_404(Order, id)
    data = request.json or {}
    courier_id = data.get("courierId")

    if order.status in (DELIVERED, CANCELED):
        return jsonify({"error": "No se puede cambiar el courier de un pedido cerrado"}), 400

    if courier_id is not None:
        courier = db.session.get(User, courier_id)
        if not courier or courier.role != "COURIER" or courier.status != "ACTIVE":
            return jsonify({"error": f"Courier con id {courier_id} no encontrado"}), 404

    _set_field(order, "courier_id", "courierId", courier_id)
    order.updated_at = utcnow()
    db.session.commit()

    return jsonify(order.to_dict())


@bp.route("/<int:id>/audit", methods=["GET"])
def get_order_audit(id):
    """Historial de cambios del pedido, en orden cronológico"""
    order = db.get_or_404(Order, id)
    audits = (
        OrderAudit.query.filter_by(order_id=order.id)
        .order_by(OrderAudit.created_at, OrderAudit.id)
        .all()
    )
    return jsonify({"orderId": order.id, "audits": [a.to_dict() for a in audits]})
