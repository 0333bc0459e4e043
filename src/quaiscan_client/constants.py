"""Shared API constants for the QuaiScan explorer API."""

REST_URL = "https://quaiscan.io/api"
ACCOUNT_MODULE = "account"
BALANCE_ACTION = "balance"
TXLIST_ACTION = "txlist"

START_BLOCK = "0"
END_BLOCK = "99999999"
DEFAULT_PAGE = 1
DEFAULT_OFFSET = 10

STATUS_OK = "1"
STATUS_SOFT_ERROR = "0"

WEI_DECIMALS = 18
DISPLAY_DECIMALS = 4
CURRENCY_SYMBOL = "QUAI"


def default_rest_base_url() -> str:
    """Return the default REST base URL for the explorer API."""
    return REST_URL
