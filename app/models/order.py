"""
Modelo: Pedido
updated_at registra el último cambio de estado y es la fecha que usan
todos los reportes financieros
"""
from ..db import db
from ..utils.dates import utcnow

ORDER_STATUSES = ("CREATED", "COURIER_WAIT", "COURIER_PICKED", "ENROUTE", "DELIVERED", "CANCELED")
CREATED = "CREATED"
COURIER_WAIT = "COURIER_WAIT"
DELIVERED = "DELIVERED"
CANCELED = "CANCELED"
# Estados desde los que se puede cancelar con comentario
CANCELABLE_STATUSES = (CREATED, COURIER_WAIT)
# Estados "vivos" que lista la página de estadísticas
ACTIVE_STATUSES = tuple(s for s in ORDER_STATUSES if s != CANCELED)


class Order(db.Model):
    __tablename__ = "orders"

    id = db.Column(db.Integer, primary_key=True)
    status = db.Column(db.String(20), nullable=False, default="CREATED")

    customer_name = db.Column(db.String(120), nullable=True)
    customer_phone = db.Column(db.String(32), nullable=True)
    delivery_address = db.Column(db.Text, nullable=True)

    courier_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)
    cancel_comment = db.Column(db.Text, nullable=True)
    # Indicaciones para el courier, editables mientras espera courier
    admin_comment = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, index=True)

    courier = db.relationship("User", foreign_keys=[courier_id])

    @property
    def total_price(self):
        return sum((item.price or 0) * (item.amount or 0) for item in self.items)

    def to_dict(self):
        return {
            "id": self.id,
            "orderNumber": f"ORD-{self.id:06d}",
            "status": self.status,
            "customerName": self.customer_name,
            "customerPhone": self.customer_phone,
            "deliveryAddress": self.delivery_address,
            "courierId": self.courier_id,
            "courierName": self.courier.fullname if self.courier else None,
            "cancelComment": self.cancel_comment,
            "adminComment": self.admin_comment,
            "totalPrice": self.total_price,
            "itemsCount": len(self.items),
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
