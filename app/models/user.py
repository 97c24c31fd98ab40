"""
Modelo: Usuario del staff
Administradores, vendedores y couriers
"""
from ..db import db
from ..utils.dates import utcnow

USER_ROLES = ("ADMIN", "SELLER", "COURIER")
USER_STATUSES = ("ACTIVE", "INACTIVE")


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    fullname = db.Column(db.String(120), nullable=False)
    phone_number = db.Column(db.String(32), nullable=False, unique=True)
    role = db.Column(db.String(16), nullable=False, default="SELLER")
    status = db.Column(db.String(16), nullable=False, default="ACTIVE")

    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    commissions = db.relationship("SellerCommission", backref="user", cascade="all, delete-orphan")

    @property
    def commission_history(self):
        """Registros de comisión, el más reciente primero"""
        return sorted(self.commissions, key=lambda c: (c.created_at, c.id or 0), reverse=True)

    @property
    def current_commission(self):
        """Último registro de comisión (o None si nunca se configuró)"""
        history = self.commission_history
        return history[0] if history else None

    def to_dict(self, include_history=False):
        current = self.current_commission
        data = {
            "id": self.id,
            "fullname": self.fullname,
            "phoneNumber": self.phone_number,
            "role": self.role,
            "status": self.status,
            "commissionRate": current.rate if current else 0,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
        if include_history:
            data["commissions"] = [c.to_dict() for c in self.commission_history]
        return data
