"""
Back-office - Aplicación Flask Principal
Staff, pedidos y reportes de comisiones de vendedores
"""
import os
from datetime import timedelta
from flask import Flask
from flask_cors import CORS
from app.config import get_config
from app.db import db, init_db


def create_app(config_name=None):
    """Factory para crear la aplicación Flask"""
    app = Flask(__name__)

    app.config.from_object(get_config(config_name))

    # ALLOWED_ORIGINS="*" abre la API a cualquier origen (sin credenciales)
    origins = [o.strip() for o in app.config["ALLOWED_ORIGINS"].split(",") if o.strip()]
    open_api = "*" in origins
    CORS(app, resources={r"/api/admin/*": {
        "origins": "*" if open_api else origins,
        "methods": ["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        "allow_headers": ["Content-Type"],
        "supports_credentials": not open_api,
    }})

    if not app.config["TESTING"]:
        # instance/ guarda la base SQLite por defecto
        os.makedirs(os.path.join(os.path.dirname(os.path.abspath(__file__)), "instance"), exist_ok=True)

    init_db(app)

    with app.app_context():
        # Seed solo en desarrollo
        if app.config["FLASK_ENV"] == "development":
            init_dev_data()

        from app.api import (
            seller_debts_bp, dashboard_bp, statistics_bp,
            users_bp, couriers_bp, orders_bp
        )

        app.register_blueprint(seller_debts_bp, url_prefix="/api/admin/seller-debts")
        app.register_blueprint(dashboard_bp, url_prefix="/api/admin/dashboard")
        app.register_blueprint(statistics_bp, url_prefix="/api/admin/statistics")
        app.register_blueprint(users_bp, url_prefix="/api/admin/users")
        app.register_blueprint(couriers_bp, url_prefix="/api/admin/couriers")
        app.register_blueprint(orders_bp, url_prefix="/api/admin/orders")

    @app.route("/health")
    def health():
        return {"status": "ok", "message": "Back-office is running!"}

    return app


def init_dev_data():
    """Inicializa datos de desarrollo"""
    from app.models import Category, Product, User, SellerCommission, Order, OrderItem
    from app.utils.dates import utcnow

    # Verificar si ya hay datos
    if User.query.first():
        return

    print("🌱 Inicializando datos de desarrollo...")

    categories = [Category(name="Vestidos"), Category(name="Blusas"), Category(name="Faldas")]
    db.session.add_all(categories)

    seller_a = User(fullname="Aida Vendedora", phone_number="+996700000001", role="SELLER")
    seller_b = User(fullname="Bakyt Vendedor", phone_number="+996700000002", role="SELLER")
    courier = User(fullname="Ivan Courier", phone_number="+996700000003", role="COURIER")
    db.session.add_all([seller_a, seller_b, courier])
    db.session.flush()

    # Comisiones: seller_b no tiene registro (tasa 0)
    db.session.add(SellerCommission(user_id=seller_a.id, rate=10))
    db.session.add(SellerCommission(user_id=seller_a.id, rate=25))

    products = [
        Product(name="Vestido de verano", category_id=categories[0].id, seller_id=seller_a.id, price=1250),
        Product(name="Blusa clásica", category_id=categories[1].id, seller_id=seller_a.id, price=900),
        Product(name="Falda mini", category_id=categories[2].id, seller_id=seller_b.id, price=700),
    ]
    db.session.add_all(products)
    db.session.flush()

    now = utcnow()
    delivered = Order(
        status="DELIVERED", customer_name="Anna", courier_id=courier.id,
        created_at=now - timedelta(days=2), updated_at=now,
    )
    pending = Order(status="CREATED", customer_name="Maria", created_at=now, updated_at=now)
    db.session.add_all([delivered, pending])
    db.session.flush()

    db.session.add_all([
        OrderItem(order_id=delivered.id, product_id=products[0].id, amount=2, price=1250),
        OrderItem(order_id=delivered.id, product_id=products[2].id, amount=1, price=700),
        OrderItem(order_id=pending.id, product_id=products[1].id, amount=1, price=900),
    ])

    db.session.commit()
    print("✅ Datos de desarrollo inicializados (3 categorías, 3 usuarios, 3 productos, 2 pedidos)")


# Crear instancia de la app para gunicorn
app = create_app()

if __name__ == "__main__":
    app.run(debug=True, host="0.0.0.0", port=5000)
