"""
Configuración de base de datos
"""
from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()


def init_db(app):
    """Inicializa la base de datos con la app Flask y crea las tablas"""
    db.init_app(app)

    with app.app_context():
        from app import models  # noqa: F401

        db.create_all()
        print(f"✅ Base de datos inicializada ({app.config['SQLALCHEMY_DATABASE_URI']})")
