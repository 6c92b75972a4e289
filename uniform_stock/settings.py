import os
from pathlib import Path
from dotenv import load_dotenv

# --- Base Directory ---
BASE_DIR = Path(__file__).resolve().parent.parent

# --- Load Environment Variables ---
load_dotenv(BASE_DIR / ".env")

# --- Path Configuration ---
INPUT_DIR = BASE_DIR / os.getenv("INPUT_DIR", "input")
OUTPUT_DIR = BASE_DIR / os.getenv("OUTPUT_DIR", "output")
LOG_DIR = BASE_DIR / os.getenv("LOG_DIR", "logs")

# --- Logging ---
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# --- Filename Configuration ---
INVENTORY_FILENAME_PREFIX = os.getenv("INVENTORY_FILENAME_PREFIX", "inventory_")
SAVE_JSON_OUTPUT = os.getenv("SAVE_JSON_OUTPUT", "true").lower() in {"1", "true", "yes"}

# --- Backend API ---
API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:5000")
API_TOKEN = os.getenv("API_TOKEN")
API_TIMEOUT = int(os.getenv("API_TIMEOUT", "15"))

# --- Webhook ---
WEBHOOK_URL = os.getenv("WEBHOOK_URL")

# --- Shared Business Logic ---
# Quantity at or below this is "low" for the per-category aggregates.
LOW_STOCK_THRESHOLD = 10

# Sentinel used by the backend for items without size variants.
NO_SIZE = "N/A"

# Graph ordering for apparel. 2XL/XXL and 3XL/XXXL are separate slots.
CLOTHING_SIZE_ORDER = [
    "XXS",
    "XS",
    "S",
    "M",
    "L",
    "XL",
    "2XL",
    "XXL",
    "3XL",
    "XXXL",
    "4XL",
    "5XL",
]

# Rank table for plain size lists (filters, dropdowns).
SIZE_RANK = {
    "XXS": 1,
    "XS": 2,
    "S": 3,
    "M": 4,
    "L": 5,
    "XL": 6,
    "2XL": 7,
    "3XL": 8,
    "4XL": 9,
    "5XL": 10,
}
UNKNOWN_SIZE_RANK = 99

# Item types whose sizes are numbers (footwear).
NUMERIC_SIZE_KEYWORDS = ["boot", "shoe", "pvc"]

# --- Size Catalogue ---
ACCESSORY_KEYWORDS = [
    "apulet",
    "badge",
    "cel bar",
    "beret logo pin",
    "belt",
    "apm tag",
]
CLOTHING_KEYWORDS = ["cloth", "pant", "digital", "inner", "company"]

CLOTHING_SIZES = ["XS", "S", "M", "L", "XL", "2XL", "3XL"]
SHOE_SIZES = [str(n) for n in range(4, 13)]
BOOT_SIZES = [str(n) for n in range(2, 13)]
BERET_SIZES = [
    "6 1/2",
    "6 5/8",
    "6 3/4",
    "6 7/8",
    "7",
    "7 1/8",
    "7 1/4",
    "7 3/8",
    "7 1/2",
    "7 5/8",
    "7 3/4",
    "7 7/8",
    "8",
    "8 1/8",
    "8 1/4",
    "8 3/8",
]
