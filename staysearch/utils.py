# staysearch/utils.py
"""Shared utilities: logging setup and the legacy price string adapter."""
import os
import re
import logging
from typing import Optional, Tuple
from dotenv import load_dotenv

load_dotenv()

def get_logger(name=__name__):
    level = os.getenv("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        format="%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
        level=getattr(logging, level, logging.INFO)
    )
    return logging.getLogger(name)

logger = get_logger("staysearch")

_UNIT_RE = re.compile(r"/\s*([A-Za-z]+)")
_CURRENCY_RE = re.compile(r"^\s*([^\d\s/]+)")

def parse_price(price_str: Optional[str]) -> Optional[int]:
    """Parse a display price such as "$350/hr" by discarding every non-digit."""
    if not price_str:
        return None
    digits = re.sub(r"[^0-9]", "", price_str)
    return int(digits) if digits else None

def split_price(price_str: str) -> Tuple[Optional[int], Optional[str], Optional[str]]:
    """Break "$350/hr" into (350, "$", "hr"); missing parts come back as None."""
    currency = _CURRENCY_RE.match(price_str)
    unit = _UNIT_RE.search(price_str)
    return (
        parse_price(price_str),
        currency.group(1) if currency else None,
        unit.group(1) if unit else None,
    )
