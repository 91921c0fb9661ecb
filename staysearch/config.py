# staysearch/config.py
"""Environment-driven settings.

Values are read once at import time after loading a local `.env` file.
"""
import os
from dotenv import load_dotenv

load_dotenv()

# JSON file holding an array of listings; the built-in fixture is used when unset
CATALOG_PATH = os.getenv("CATALOG_PATH")

DEFAULT_PAGE_LIMIT = int(os.getenv("DEFAULT_PAGE_LIMIT", 20))
MAX_PAGE_LIMIT = int(os.getenv("MAX_PAGE_LIMIT", 100))

AI_HISTORY_SIZE = int(os.getenv("AI_HISTORY_SIZE", 10))

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", 8000))
