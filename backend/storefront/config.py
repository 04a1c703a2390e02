import os
from dotenv import load_dotenv

load_dotenv()

class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", SECRET_KEY)
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Homepage composition
    HOMEPAGE_API_BASE_URL = os.getenv("HOMEPAGE_API_BASE_URL", "http://localhost:5000/api/v1")
    HOMEPAGE_CACHE_TTL = int(os.getenv("HOMEPAGE_CACHE_TTL", 300))
    HOMEPAGE_FALLBACK_IMAGE = os.getenv(
        "HOMEPAGE_FALLBACK_IMAGE",
        "https://images.unsplash.com/photo-1505577081107-4a4167cd81d0?auto=format&fit=crop&w=800&q=85",
    )
    HOMEPAGE_LAZY_BATCH_SIZE = int(os.getenv("HOMEPAGE_LAZY_BATCH_SIZE", 4))
    HOMEPAGE_VIEWPORT = os.getenv("HOMEPAGE_VIEWPORT", "desktop")

class DevelopmentConfig(BaseConfig):
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = os.getenv("DEV_DATABASE_URI", "sqlite:///storefront-dev.db")

class ProductionConfig(BaseConfig):
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URI")

class TestingConfig(BaseConfig):
    TESTING = True
    SECRET_KEY = "test-secret"
    JWT_SECRET_KEY = "test-jwt-secret-with-enough-length-for-hs256"
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"

config_by_name = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
}
