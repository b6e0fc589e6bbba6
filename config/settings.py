"""
Settings — Default configuration values for the multiple shipping addresses scenario.

This module provides the DEFAULT_SETTINGS dict that the orchestrator uses as
fallback values when environment variables are not set. Credentials and
endpoints are loaded from .env at runtime and have no defaults.

Configuration precedence (highest to lowest):
  1. CLI flags (--debug, --output, --no-save, --quantity)
  2. Environment variables (from .env file)
  3. DEFAULT_SETTINGS (this file)

Settings reference:
  RUN_NAME                Label used in output folder naming
  OUTPUT_DIR              Where to write request/response snapshots (default: ./dynamic)
  OUTPUT_RETENTION_DAYS   How many days to keep old output folders (0 = keep forever)
  SAVE_JSON               Whether to write snapshots to disk (default: True)
  DEBUG                   Whether to print verbose output (default: False)
  REQUEST_TIMEOUT         Per-request timeout in seconds
  CART_QUANTITY           Line item quantity used by both scenarios
  USER_AGENT              Sent on every commercetools API call
"""

RUN_NAME = "multiple_shipping_addresses"

DEFAULT_SETTINGS = {
    "RUN_NAME": RUN_NAME,
    "OUTPUT_DIR": "./dynamic",
    "OUTPUT_RETENTION_DAYS": 30,
    "SAVE_JSON": True,
    "DEBUG": False,
    "REQUEST_TIMEOUT": 30,
    "CART_QUANTITY": 100,
    "USER_AGENT": "httpie-shipping-addresses-tutorial",
}

REQUIRED_ENV_VARS = [
    "CTP_AUTH_URL",
    "CTP_API_URL",
    "CTP_PROJECT_KEY",
    "CTP_CLIENT_ID",
    "CTP_CLIENT_SECRET",
]

# Cart and currency settings used throughout the tutorial
CURRENCY = "EUR"
COUNTRY = "DE"
LOCALE = "de"
PRODUCT_CENT_AMOUNT = 4200
TAX_RATE = {"name": "de", "amount": 0.19, "includedInPrice": True, "country": "DE"}

# Two shipping destinations and how the cart quantity is split between them
SHIPPING_ADDRESSES = [
    {
        "key": "berlin",
        "firstName": "Max",
        "lastName": "Mustermann",
        "streetName": "Alexanderplatz",
        "streetNumber": "1",
        "postalCode": "10178",
        "city": "Berlin",
        "country": "DE",
    },
    {
        "key": "munich",
        "firstName": "Erika",
        "lastName": "Mustermann",
        "streetName": "Marienplatz",
        "streetNumber": "8",
        "postalCode": "80331",
        "city": "München",
        "country": "DE",
    },
]

# Fraction of the cart quantity shipped to the first address; the rest goes to the second
FIRST_ADDRESS_SHARE = 0.3
