import os
from dotenv import load_dotenv

load_dotenv()

# --- Database ---
DB_USER = os.getenv("POSTGRES_USER", "postgres")
DB_PASSWORD = os.getenv("POSTGRES_PASSWORD", "postgres")
DB_HOST = os.getenv("POSTGRES_HOST", "localhost") # In Docker, this will be 'postgres'
DB_PORT = os.getenv("POSTGRES_PORT", "5433")
DB_NAME = os.getenv("POSTGRES_DB", "studio")

# DATABASE_URL wins when set (tests point it at aiosqlite)
DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"postgresql+asyncpg://{DB_USER}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}",
)
SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() == "true"

# --- Auth ---
JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY")
JWT_EXPIRE_MINUTES = int(os.getenv("JWT_EXPIRE_MINUTES", "60"))

# --- Payment gateway ---
RAZORPAY_KEY_ID = os.getenv("RAZORPAY_KEY_ID", "")
RAZORPAY_KEY_SECRET = os.getenv("RAZORPAY_KEY_SECRET", "")
RAZORPAY_API_URL = os.getenv("RAZORPAY_API_URL", "https://api.razorpay.com/v1")
GATEWAY_TIMEOUT_SECONDS = float(os.getenv("GATEWAY_TIMEOUT_SECONDS", "15"))

# --- Tax & shipping ---
SELLER_STATE_CODE = os.getenv("SELLER_STATE_CODE", "24")
GST_RATE = float(os.getenv("GST_RATE", "18"))
SHIPPING_FLAT_RATE = float(os.getenv("SHIPPING_FLAT_RATE", "150"))
FREE_SHIPPING_THRESHOLD = float(os.getenv("FREE_SHIPPING_THRESHOLD", "2500"))

# --- Invoices ---
INVOICE_STORAGE_DIR = os.getenv("INVOICE_STORAGE_DIR", "storage/invoices")
INVOICE_PUBLIC_BASE_URL = os.getenv("INVOICE_PUBLIC_BASE_URL", "http://localhost:8000/invoices/files")
ASSETS_DIR = os.getenv("ASSETS_DIR", "storage/email-assets")
INVOICE_NUMBER_RETRIES = int(os.getenv("INVOICE_NUMBER_RETRIES", "3"))

# --- Observability ---
OTLP_ENDPOINT = os.getenv("OTLP_ENDPOINT", "http://localhost:4317")
OBSERVABILITY_ENABLED = os.getenv("OBSERVABILITY_ENABLED", "true").lower() == "true"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# --- Rate limiting ---
# Checkout and booking creation both open a payment-gateway order
CHECKOUT_RATE_LIMIT = os.getenv("CHECKOUT_RATE_LIMIT", "10/minute")
RATE_LIMIT_ENABLED = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"
