"""Logger for the Storefront domain."""

import logging

import structlog

logger = structlog.get_logger("storefront")

# requests logs every connection through urllib3
logging.getLogger("urllib3").setLevel(logging.WARNING)
