import os
from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL")
UPLOAD_DIR = os.getenv("UPLOAD_DIR", "uploads")
DB_POOL_MAX = int(os.getenv("DB_POOL_MAX", "10"))
# psycopg2 closes returned connections beyond minconn, so keep the pool warm
DB_POOL_MIN = int(os.getenv("DB_POOL_MIN", str(DB_POOL_MAX)))
ALLOWED_ORIGINS = [o.strip() for o in os.getenv("ALLOWED_ORIGINS", "*").split(",") if o.strip()]
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "5000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
