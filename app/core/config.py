# app/core/config.py
import os
from dotenv import load_dotenv

load_dotenv()

# ---------------- MongoDB ----------------
MONGO_URI = os.getenv("MONGO_URI", "mongodb://localhost:27017")
MONGO_DB = os.getenv("MONGO_DB", "tour_booking")

# ---------------- Travel time lookup ----------------
GOOGLE_MAPS_API_KEY = os.getenv("GOOGLE_MAPS_API_KEY")  # optional, fallback estimate when missing
DISTANCE_MATRIX_URL = os.getenv(
    "DISTANCE_MATRIX_URL", "https://maps.googleapis.com/maps/api/distancematrix/json"
)
TRAVEL_REGION = os.getenv("TRAVEL_REGION", "in")
TRAVEL_TIME_TIMEOUT_SECONDS = float(os.getenv("TRAVEL_TIME_TIMEOUT_SECONDS", "10"))

# ---------------- Booking commits ----------------
# When enabled, create/update hold a per-vehicle lock across availability check and write
SERIALIZE_BOOKING_COMMITS = os.getenv("SERIALIZE_BOOKING_COMMITS", "false").lower() in {"1", "true", "yes"}

# ---------------- Logging ----------------
LOG_FILE = os.getenv("LOG_FILE", "tour_booking_fastapi.log")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
