from decimal import Decimal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./storefront.db"

    # Session (anonymous cart id + signed-in user id live here)
    SESSION_SECRET_KEY: str = "change-me"
    SESSION_MAX_AGE: int = 3600 * 24 * 7

    # Shop
    SHOP_NAME: str = "My Shop"
    LOG_LEVEL: str = "INFO"

    # Cart pricing
    FREE_SHIPPING_THRESHOLD: Decimal = Decimal("100")
    FLAT_SHIPPING_PRICE: Decimal = Decimal("10")
    TAX_RATE: Decimal = Decimal("0.15")

    # Optimistic locking on cart writes
    CART_UPDATE_RETRIES: int = 3

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
