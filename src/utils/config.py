# application-wide constants, some overridable through the environment
import os

DB_PATH = os.getenv("URBANAURA_DB_PATH", "data/urbanaura.sqlite")

# persisted collection keys
USER_KEY = "urbanaura_user"
PRODUCTS_KEY = "urbanaura_products"
ORDERS_KEY = "urbanaura_orders"

ADMIN_EMAIL = "admin@urbanaura.com"
ADMIN_PASSWORD = "admin123"

CATEGORIES = {
    "iphone-cases": "iPhone Cases",
    "sunglasses": "Sunglasses",
}

DEFAULT_IMAGE = (
    "https://images.unsplash.com/photo-1601784551446-20c9e07cdbdb?w=400&h=400&fit=crop"
)

PAYMENT_DELAY_SECONDS = float(os.getenv("URBANAURA_PAYMENT_DELAY", "3.0"))
PAYMENT_SUCCESS_RATE = 0.9

# "area" uses the area fee table, "flat" charges nothing
DELIVERY_FEE_MODE = os.getenv("URBANAURA_DELIVERY_FEES", "area")

CONTACT_PHONE = "254701036266"
CURRENCY = "KSh"
