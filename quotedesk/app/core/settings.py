import os
from decimal import Decimal


class Settings:
    def __init__(self):
        self.app_name = "QuoteDesk"
        self.api_version = "1.0.0"
        self.environment = os.getenv("QUOTEDESK_ENVIRONMENT", "development")
        self.secret_key = os.getenv("QUOTEDESK_SECRET_KEY", "CHANGE_ME")
        self.SECRET_KEY = self.secret_key
        self.access_token_expire_minutes = int(os.getenv("QUOTEDESK_ACCESS_TOKEN_EXPIRE_MINUTES", "30"))
        self.ACCESS_TOKEN_EXPIRE_MINUTES = self.access_token_expire_minutes
        self.database_url = os.getenv("QUOTEDESK_DATABASE_URL", "sqlite:///./quotedesk.db")
        self.log_level = os.getenv("QUOTEDESK_LOG_LEVEL", "INFO")
        self.quotation_prefix = os.getenv("QUOTEDESK_QUOTATION_PREFIX", "QTN")
        self.default_tax_rate = Decimal(os.getenv("QUOTEDESK_DEFAULT_TAX_RATE", "18"))
        self.currency = os.getenv("QUOTEDESK_CURRENCY", "INR")


_settings_instance = None


def get_settings():
    """Return a singleton Settings instance."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
