# config.py
import os
from urllib.parse import urlsplit
from dotenv import load_dotenv

load_dotenv()

MONGODB_URI = os.getenv("MONGODB_URI", "mongodb://localhost:27017/studentdb")
MONGODB_TIMEOUT_MS = int(os.getenv("MONGODB_TIMEOUT_MS", "2000"))
# Database name falls back to the path component of the URI
MONGODB_DB = os.getenv("MONGODB_DB") or urlsplit(MONGODB_URI).path.lstrip("/") or "studentdb"

HOST = os.getenv("HOST", "127.0.0.1")
PORT = int(os.getenv("PORT", "3000"))
FALLBACK_PORT = int(os.getenv("FALLBACK_PORT", "3001"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",") if o.strip()]
