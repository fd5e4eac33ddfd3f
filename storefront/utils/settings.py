# storefront/utils/settings.py
import os
from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./storefront.db")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8000")

# pricing policy, amounts in store currency
FREE_SHIPPING_THRESHOLD = os.getenv("FREE_SHIPPING_THRESHOLD", "1000")
SHIPPING_FLAT_FEE = os.getenv("SHIPPING_FLAT_FEE", "40")
TAX_RATE = os.getenv("TAX_RATE", "0.02")
