"""
Config module - Defaults and tutorial data for the scenario runner.
"""

from .settings import (
    DEFAULT_SETTINGS,
    REQUIRED_ENV_VARS,
    CURRENCY,
    COUNTRY,
    LOCALE,
    PRODUCT_CENT_AMOUNT,
    TAX_RATE,
    SHIPPING_ADDRESSES,
    FIRST_ADDRESS_SHARE,
)

__all__ = [
    'DEFAULT_SETTINGS',
    'REQUIRED_ENV_VARS',
    'CURRENCY',
    'COUNTRY',
    'LOCALE',
    'PRODUCT_CENT_AMOUNT',
    'TAX_RATE',
    'SHIPPING_ADDRESSES',
    'FIRST_ADDRESS_SHARE',
]
