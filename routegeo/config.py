import os
from pathlib import Path
from dotenv import load_dotenv

# Always load .env from the package folder
load_dotenv(Path(__file__).resolve().parent / ".env")


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


TRAFFIC_SERVICE_URL = os.getenv("TRAFFIC_SERVICE_URL", "http://localhost:8002").rstrip("/")
TRAFFIC_ROUTE_PATH = os.getenv("TRAFFIC_ROUTE_PATH", "/api/v1/traffic/route")
TRAFFIC_TIMEOUT_S = float(os.getenv("TRAFFIC_TIMEOUT_S", "10.0"))

# Mirrors the browser geolocation options the dashboard used
TRACKER_HIGH_ACCURACY = _flag("TRACKER_HIGH_ACCURACY", "true")
TRACKER_MAX_AGE_MS = int(os.getenv("TRACKER_MAX_AGE_MS", "10000"))
TRACKER_TIMEOUT_MS = int(os.getenv("TRACKER_TIMEOUT_MS", "10000"))

# Bangalore, used when a route has nothing to frame
DEFAULT_CENTER_LAT = float(os.getenv("DEFAULT_CENTER_LAT", "12.9716"))
DEFAULT_CENTER_LNG = float(os.getenv("DEFAULT_CENTER_LNG", "77.5946"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

APP_HOST = os.getenv("APP_HOST", "127.0.0.1")
APP_PORT = int(os.getenv("APP_PORT", "8000"))
CORS_ORIGINS = [
    o.strip()
    for o in os.getenv("CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173").split(",")
    if o.strip()
]
