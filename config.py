import os
from dotenv import load_dotenv

load_dotenv()

TESTING = os.getenv("TESTING") == "1"
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./reservations.db")

# IANA-Zone des Lokals, z. B. "America/Argentina/Buenos_Aires"
BUSINESS_TIMEZONE = os.getenv("BUSINESS_TIMEZONE")

# "greedy" oder "exact"
ALLOCATION_STRATEGY = os.getenv("ALLOCATION_STRATEGY", "greedy").lower()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
