"""
Modelo: Item de pedido
Un pedido puede tener productos de varios vendedores
"""
from ..db import db
from ..utils.dates import utcnow


class OrderItem(db.Model):
    __tablename__ = "order_items"

    id = db.Column(db.Integer, primary_key=True)
    order_id = db.Column(db.Integer, db.ForeignKey("orders.id"), nullable=False, index=True)
    product_id = db.Column(db.Integer, db.ForeignKey("products.id"), nullable=False)

    # Cantidad de unidades
    amount = db.Column(db.Integer, nullable=False, default=1)

    # Precio unitario cobrado al cliente (con comisión incluida)
    price = db.Column(db.Float, nullable=False, default=0)

    created_at = db.Column(db.DateTime, default=utcnow)

    # Relaciones
    order = db.relationship("Order", backref="items")
    product = db.relationship("Product", backref="order_items")

    def to_dict(self):
        return {
            "id": self.id,
            "orderId": self.order_id,
            "productId": self.product_id,
            "productName": self.product.name if self.product else None,
            "sellerId": self.product.seller_id if self.product else None,
            "amount": self.amount,
            "price": self.price,
            "total": (self.price or 0) * (self.amount or 0),
        }
