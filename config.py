import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()

TRUE_VALUES = ("1", "true", "yes", "on")


def setting(key, default=None):
    """env.yaml value, then environment variable (kept as the raw string), then default"""
    if key in data:
        return data[key]
    return os.environ.get(key, default)


def flag(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in TRUE_VALUES
    return bool(value)


def string_list(value, separator=",") -> list:
    """YAML list as is; an environment value split on the separator"""
    if value is None:
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.split(separator) if part.strip()]
    return list(value)


def optional_string(value):
    return None if value is None else str(value)


class ConfigurationError(Exception):
    """Raised at startup when required settings are missing or invalid"""


class ApplicationConfig:
    DB_URI = optional_string(setting("DB_URI"))
    API_PREFIX = str(setting("API_PREFIX", "/api"))
    API_PORT = int(setting("API_PORT", 8000))
    API_HOST = str(setting("API_HOST", "0.0.0.0"))
    API_RELOAD = flag(setting("API_RELOAD", False))
    CORS_ORIGINS = string_list(setting("CORS_ORIGINS", []))
    CORS_ALLOW_CREDENTIALS = flag(setting("CORS_ALLOW_CREDENTIALS", True))
    LOG_LEVEL = str(setting("LOG_LEVEL", "INFO"))
    ENABLE_LOGGING_MIDDLEWARE = flag(setting("ENABLE_LOGGING_MIDDLEWARE", True))
    AUTO_CREATE_TABLES = flag(setting("AUTO_CREATE_TABLES", False))

    # Hosted auth provider
    AUTH_URL = optional_string(setting("AUTH_URL"))
    AUTH_API_KEY = optional_string(setting("AUTH_API_KEY"))
    AUTH_DISABLED = flag(setting("AUTH_DISABLED", False))
    AUTH_DEV_USER_ID = str(setting("AUTH_DEV_USER_ID", "local-dev-user"))
    AUTH_TIMEOUT_SECONDS = float(setting("AUTH_TIMEOUT_SECONDS", 10.0))

    # Dashboard
    INVOICE_PAGE_SIZE = int(setting("INVOICE_PAGE_SIZE", 10))
    FILTER_DEBOUNCE_SECONDS = float(setting("FILTER_DEBOUNCE_SECONDS", 0.5))

    # Issuer printed in the invoice PDF header
    COMPANY_NAME = str(setting("COMPANY_NAME", "Marketlube"))
    # Address lines contain commas, so an environment value separates lines with ";"
    COMPANY_ADDRESS_LINES = string_list(
        setting(
            "COMPANY_ADDRESS_LINES",
            ["1414, Phase 1, Hilite Business Park,", "Calicut, Kerala 673014"],
        ),
        separator=";",
    )
    COMPANY_PHONE = optional_string(setting("COMPANY_PHONE", "+91 9061663675"))
    COMPANY_EMAIL = optional_string(setting("COMPANY_EMAIL", "hello@marketlube.in"))
    COMPANY_WEBSITE = optional_string(setting("COMPANY_WEBSITE", "www.marketlube.in"))
    COMPANY_GSTIN = optional_string(setting("COMPANY_GSTIN", "32ABFFP2844M1Z2"))

    # Payment info used until the user saves their own
    DEFAULT_PAYMENT_ACCOUNT_NAME = str(setting("DEFAULT_PAYMENT_ACCOUNT_NAME", "PRIMARKETLUBE LLP"))
    DEFAULT_PAYMENT_ACCOUNT_NUMBER = str(setting("DEFAULT_PAYMENT_ACCOUNT_NUMBER", "924020005981756"))
    DEFAULT_PAYMENT_IFSC = str(setting("DEFAULT_PAYMENT_IFSC", "UTIB0002932"))


def validate_config(config) -> None:
    """
    Fail fast on missing settings

    Args:
        config: ApplicationConfig or a subclass

    Raises:
        ConfigurationError: naming every missing or invalid key
    """
    required = ["DB_URI", "AUTH_API_KEY"]
    if not config.AUTH_DISABLED:
        required.append("AUTH_URL")

    missing = [key for key in required if not getattr(config, key, None)]
    if missing:
        raise ConfigurationError(f"Missing required configuration: {', '.join(missing)}")

    if int(config.INVOICE_PAGE_SIZE) <= 0:
        raise ConfigurationError("INVOICE_PAGE_SIZE must be greater than zero")
