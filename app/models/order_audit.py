"""
Modelo: Historial de cambios de pedido
Se escribe un registro por campo modificado (estado, courier, comentarios).
Nunca se edita ni se borra.
"""
from ..db import db
from ..utils.dates import utcnow


class OrderAudit(db.Model):
    __tablename__ = "order_audits"

    id = db.Column(db.Integer, primary_key=True)
    order_id = db.Column(db.Integer, db.ForeignKey("orders.id"), nullable=False, index=True)

    # Campo modificado: status, courierId, adminComment, cancelComment
    action = db.Column(db.String(32), nullable=False)
    old_value = db.Column(db.Text, nullable=True)
    new_value = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    # Relación
    order = db.relationship("Order", backref="audits")

    def to_dict(self):
        return {
            "id": self.id,
            "orderId": self.order_id,
            "action": self.action,
            "oldValue": self.old_value,
            "newValue": self.new_value,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
