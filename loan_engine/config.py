"""Runtime settings for the loan engine.

Values are read from the environment once, at import time. The calculation
functions only use ``BROKERAGE_FEE_RATE``; the rest is consumed by the
command-line front end.
"""

from __future__ import annotations

import logging
import os
from decimal import Decimal
from typing import Optional

DEFAULT_CURRENCY = os.environ.get("LOAN_ENGINE_CURRENCY", "CAD").upper()
BROKERAGE_FEE_RATE = Decimal(os.environ.get("LOAN_ENGINE_BROKERAGE_FEE_RATE", "0.68"))
LOG_LEVEL = os.environ.get("LOAN_ENGINE_LOG_LEVEL", "WARNING").upper()
MAX_SCHEDULE_ROWS = int(os.environ.get("LOAN_ENGINE_MAX_ROWS", "120"))

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: Optional[str] = None) -> None:
    """Install a stream handler on the root logger.

    ``level`` overrides ``LOAN_ENGINE_LOG_LEVEL``. Unknown level names fall
    back to WARNING.
    """
    name = (level or LOG_LEVEL).upper()
    numeric = getattr(logging, name, None)
    if not isinstance(numeric, int):
        numeric = logging.WARNING
    logging.basicConfig(level=numeric, format=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    logging.getLogger().setLevel(numeric)
