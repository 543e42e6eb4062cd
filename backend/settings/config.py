"""
Centralized configuration management using the Singleton pattern.
This module provides a single point of access to global application settings,
eliminating the need for direct database queries from business logic.
"""

from decimal import Decimal
from typing import Optional, Any
from django.core.exceptions import ImproperlyConfigured
import logging

logger = logging.getLogger(__name__)

DEFAULT_TAX_RATE = Decimal("0.10")
DEFAULT_SERVICE_CHARGE_RATE = Decimal("0.10")
DEFAULT_CURRENCY = "IDR"


class AppSettings:
    """
    A LAZY singleton class that provides centralized access to global application settings.
    It defers database loading until the first setting is accessed, allowing management
    commands like 'makemigrations' to run before the database schema is up to date.
    """

    _instance: Optional["AppSettings"] = None
    _initialized: bool = False

    def __new__(cls) -> "AppSettings":
        """
        Implement the singleton pattern to ensure only one instance exists.
        """
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        """
        Initialization is deferred to the first attribute access.
        """
        pass

    def _setup(self):
        """
        The actual setup and loading method. Called only once.
        """
        if not self._initialized:
            self.load_settings()
            self._initialized = True

    def __getattr__(self, name: str) -> Any:
        """
        Lazily loads settings on first access, then retrieves the attribute.
        """
        if not self._initialized:
            self._setup()

        # After setup, the attribute should exist in the instance's __dict__.
        # This check prevents infinite recursion for attributes that truly don't exist.
        try:
            return self.__dict__[name]
        except KeyError:
            raise AttributeError(f"'AppSettings' object has no attribute '{name}'")

    def load_settings(self) -> None:
        """
        Load settings from the database and populate instance attributes.
        """
        # Import here to avoid circular imports
        from .models import GlobalSettings

        try:
            settings_obj = GlobalSettings.load()
        except Exception as e:
            raise ImproperlyConfigured(f"Failed to load settings: {e}")

        # === FINANCIAL SETTINGS ===
        self.tax_rate: Decimal = settings_obj.tax_rate
        self.service_charge_rate: Decimal = settings_obj.service_charge_rate
        self.currency: str = settings_obj.currency

        # === BRAND IDENTITY ===
        self.brand_name: str = settings_obj.brand_name
        self.brand_receipt_footer: str = settings_obj.brand_receipt_footer

    def reload(self) -> None:
        """
        Reload settings from the database.
        This method is called when settings are updated to refresh the cache.
        """
        self.load_settings()
        self._initialized = True
        logger.info("AppSettings cache reloaded")

    def reset(self) -> None:
        """Forget loaded values; the next attribute access reads the database again."""
        for name in ("tax_rate", "service_charge_rate", "currency", "brand_name", "brand_receipt_footer"):
            self.__dict__.pop(name, None)
        self._initialized = False

    def get_financial_settings(self) -> dict:
        """
        Get financial settings as a dictionary.
        Useful for order calculations.
        """
        return {
            "tax_rate": self.tax_rate,
            "service_charge_rate": self.service_charge_rate,
            "currency": self.currency,
        }

    def get_receipt_config(self) -> dict:
        return {
            "brand_name": self.brand_name,
            "footer": self.brand_receipt_footer,
            "currency": self.currency,
        }

    def __str__(self) -> str:
        return (
            f"AppSettings(brand='{self.brand_name}', "
            f"currency={self.currency}, "
            f"tax={self.tax_rate}, service={self.service_charge_rate})"
        )


# Create the singleton instance at module level
app_settings = AppSettings()
