import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file)
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./invoices.db")
    AUTO_CREATE_TABLES = bool(data.get("AUTO_CREATE_TABLES", True))
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    ENABLE_LOGGING_MIDDLEWARE = bool(data.get("ENABLE_LOGGING_MIDDLEWARE", 1))

    # Invoice defaults
    DEFAULT_CURRENCY = data.get("DEFAULT_CURRENCY", "BRL")

    # Invoice generation worker
    SUBSCRIPTION_BILLING_ENABLED = bool(data.get("SUBSCRIPTION_BILLING_ENABLED", True))
    PAYMENT_PLAN_BILLING_ENABLED = bool(data.get("PAYMENT_PLAN_BILLING_ENABLED", True))
    PAYMENT_PLAN_LEAD_DAYS = data.get("PAYMENT_PLAN_LEAD_DAYS", 7)  # Bill installments due within N days
    WORKER_RUN_WINDOW_DAYS = data.get("WORKER_RUN_WINDOW_DAYS", 3)  # First N days of a month
    WORKER_INTERVAL_SECONDS = data.get("WORKER_INTERVAL_SECONDS", 86400)  # Daily
