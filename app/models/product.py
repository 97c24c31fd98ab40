"""
Modelo: Producto
Cada producto pertenece a un vendedor (User con rol SELLER)
"""
from ..db import db
from ..utils.dates import utcnow

PRODUCT_STATUSES = ("ACTIVE", "INACTIVE")


class Product(db.Model):
    __tablename__ = "products"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(160), nullable=False)
    category_id = db.Column(db.Integer, db.ForeignKey("categories.id"), nullable=False)
    seller_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)

    # Precio de venta al cliente (ya incluye la comisión del admin)
    price = db.Column(db.Float, nullable=False, default=0)

    status = db.Column(db.String(16), nullable=False, default="ACTIVE")

    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    # Relaciones
    category = db.relationship("Category", backref="products")
    seller = db.relationship("User", backref="products")

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "categoryId": self.category_id,
            "sellerId": self.seller_id,
            "price": self.price,
            "status": self.status,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
