import os

DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite://./sales_admin.sqlite3")

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
# Comma separated logger prefixes, e.g. "sales_admin.features.sales,sales_admin.main".
# Empty means every namespace is logged.
LOG_NAMESPACES: list[str] = [
    ns.strip() for ns in os.getenv("LOG_NAMESPACES", "").split(",") if ns.strip()
]

DEFAULT_LOW_STOCK_THRESHOLD: int = int(os.getenv("DEFAULT_LOW_STOCK_THRESHOLD", "10"))

MODEL_MODULES: list[str] = [
    "sales_admin.features.inventory.models",
    "sales_admin.features.sales.models",
    "aerich.models",  # For Aerich migrations
]


def tortoise_config(db_url: str = DATABASE_URL) -> dict:
    """Builds the Tortoise ORM configuration shared by the API, the CLI and aerich."""
    return {
        "connections": {"default": db_url},
        "apps": {
            "models": {
                "models": MODEL_MODULES,
                "default_connection": "default",
            }
        },
        "use_tz": True,
        "timezone": "UTC",
    }


TORTOISE_ORM_CONFIG = tortoise_config()
