"""
Configuración de la aplicación
"""
import os
from pathlib import Path
from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent

load_dotenv(BASE_DIR / '.env')


class Config:
    """Configuración base"""

    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key-change-in-production")
    FLASK_ENV = os.getenv("FLASK_ENV", "development")
    TESTING = False

    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL") or f"sqlite:///{BASE_DIR}/instance/backoffice.db"
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = False

    # CORS (lista separada por comas, "*" en desarrollo)
    ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*")

    # Reportes
    # Zona horaria del negocio (Bishkek, UTC+6): se usa para fechas sin offset
    # y para agrupar los gráficos por día/semana/mes
    REPORT_UTC_OFFSET_HOURS = int(os.getenv("REPORT_UTC_OFFSET_HOURS", "6"))
    RECENT_ORDERS_LIMIT = int(os.getenv("RECENT_ORDERS_LIMIT", "5"))
    TOP_PRODUCTS_LIMIT = int(os.getenv("TOP_PRODUCTS_LIMIT", "5"))


class DevelopmentConfig(Config):
    """Configuración de desarrollo"""
    DEBUG = True


class ProductionConfig(Config):
    """Configuración de producción"""
    DEBUG = False


class TestingConfig(Config):
    """Configuración para tests (SQLite en memoria)"""
    TESTING = True
    FLASK_ENV = "testing"
    SQLALCHEMY_DATABASE_URI = "sqlite://"


config_by_name = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
}


def get_config(name=None):
    """Obtiene la configuración según el entorno"""
    env = name or os.getenv("FLASK_ENV", "development")
    return config_by_name.get(env, DevelopmentConfig)
