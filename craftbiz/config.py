from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./craftbiz.db"
    STORAGE_NAMESPACE: str = "craftbiz"  # prefix for the recipes/orders/replies keys
    SHOP_NAME: Optional[str] = None
    CURRENCY_SUFFIX: str = "lei"
    DEFAULT_CLIENT_NAME: str = "Client Nume SRL"

    # Generated PDF offers land here before they are handed to the share sink
    EXPORT_DIR: str = "./exports"

    class Config:
        env_file = ".env"


settings = Settings()
