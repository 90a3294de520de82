"""Configuration and settings."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Paths
PROJECT_ROOT = Path(__file__).resolve().parent.parent
DATA_DIR = PROJECT_ROOT / "data"
OUTPUT_DIR = PROJECT_ROOT / "output"
CONFIG_DIR = PROJECT_ROOT / "config"

# Ensure directories exist
DATA_DIR.mkdir(parents=True, exist_ok=True)
OUTPUT_DIR.mkdir(parents=True, exist_ok=True)

# Database
DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{DATA_DIR / 'medassist.db'}")
SEED_ON_INIT = os.getenv("SEED_ON_INIT", "true").lower() == "true"

# Logging
LOG_DIR = OUTPUT_DIR / "logs"
LOG_FILE = LOG_DIR / "app.jsonl"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
# "pretty" (coloured key=value) or "json" for the console; the file is always JSONL
LOG_CONSOLE_FORMAT = os.getenv("LOG_CONSOLE_FORMAT", "pretty").lower()
LOG_FILE_ENABLED = os.getenv("LOG_FILE_ENABLED", "true").lower() == "true"
VERBOSE_LOGGING = os.getenv("VERBOSE_LOGGING", "false").lower() == "true"

# Ensure log directory exists
LOG_DIR.mkdir(parents=True, exist_ok=True)

# Tracing (OpenTelemetry, OTLP over HTTP)
TRACING_ENABLED = os.getenv("TRACING_ENABLED", "false").lower() == "true"
OTEL_EXPORTER_OTLP_ENDPOINT = os.getenv(
    "OTEL_EXPORTER_OTLP_ENDPOINT",
    "http://localhost:4318/v1/traces",
)
SERVICE_NAME = os.getenv("SERVICE_NAME", "medassist")
DEPLOYMENT_ENVIRONMENT = os.getenv("DEPLOYMENT_ENVIRONMENT", "development")

# API server
API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("API_PORT", "5000"))

# Search defaults (radius in meters)
SEARCH_DEFAULT_RADIUS_M = int(os.getenv("SEARCH_DEFAULT_RADIUS_M", "20000"))
NEARBY_DEFAULT_RADIUS_M = int(os.getenv("NEARBY_DEFAULT_RADIUS_M", "10000"))
DEFAULT_PAGE_LIMIT = int(os.getenv("DEFAULT_PAGE_LIMIT", "20"))
MAX_PAGE_LIMIT = int(os.getenv("MAX_PAGE_LIMIT", "100"))
TRENDING_LIMIT = int(os.getenv("TRENDING_LIMIT", "10"))
PHARMACY_TOP_MEDICINES_LIMIT = int(os.getenv("PHARMACY_TOP_MEDICINES_LIMIT", "10"))

# Operating hours are evaluated in this zone; empty means server local time
PHARMACY_TIMEZONE = os.getenv("PHARMACY_TIMEZONE", "").strip()

# Subscription plan table
PLANS_CONFIG_PATH = Path(os.getenv("PLANS_CONFIG_PATH", "") or CONFIG_DIR / "plans.yaml")
DEFAULT_CURRENCY = os.getenv("DEFAULT_CURRENCY", "KES")
