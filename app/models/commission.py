"""
Modelo: Comisión de vendedor
Historial append-only: cada cambio de tasa crea un registro nuevo.
La tasa vigente es la del registro creado más recientemente.
"""
from ..db import db
from ..utils.dates import utcnow


class SellerCommission(db.Model):
    __tablename__ = "commissions"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)

    # Porcentaje que se suma sobre el precio base del vendedor
    rate = db.Column(db.Float, nullable=False, default=0)

    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    def to_dict(self):
        return {
            "id": self.id,
            "userId": self.user_id,
            "rate": self.rate,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
