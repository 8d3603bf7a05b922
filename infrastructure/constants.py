"""
Constants Module - Centralized configuration values
===================================================

PURPOSE: Single source of truth for constants shared by the workflow engine,
         the operator bot and the submission transport
PATTERN: Modular constants organized by category
"""

# Record store collections
RESERVATIONS_COLLECTION = "reservations"
ORDERS_COLLECTION = "orders"
DEFAULT_COLLECTIONS = (RESERVATIONS_COLLECTION, ORDERS_COLLECTION)

# Capacity
DEFAULT_CAPACITY_LIMIT = 10

# Decision tokens carried in Telegram callback data: <kind>_<action>_<id>
DECISION_TOKEN_DELIMITER = "_"
DECISION_TOKEN_PARTS = 3
# Telegram rejects callback data longer than this many bytes
CALLBACK_DATA_MAX_BYTES = 64

# Wire aliases still present on buttons posted by the previous deployment
LEGACY_KIND_ALIASES = {
    "reserva": "reservation",
    "pedido": "order",
}
LEGACY_ACTION_ALIASES = {
    "confirmar": "confirm",
    "recusar": "decline",
}

# Customer messaging
DEFAULT_BUSINESS_NAME = "Nonna Nita"
DEFAULT_WHATSAPP_COUNTRY_CODE = "55"
WHATSAPP_BASE_URL = "https://wa.me"
DEFAULT_FRONTEND_URL = "https://nonnanitta.netlify.app"

# Frontend redirect fragments understood by the public website
RESERVATION_REDIRECT_FRAGMENT = "#reservas?reserva={outcome}"
ORDER_REDIRECT_FRAGMENT = "#pedido?pedido={outcome}"
REDIRECT_SUCCESS = "sucesso"
REDIRECT_CAPACITY = "erro"
REDIRECT_INVALID = "invalido"
REDIRECT_UNAVAILABLE = "indisponivel"

# Transport defaults
DEFAULT_HTTP_HOST = "0.0.0.0"
DEFAULT_HTTP_PORT = 3000
DEFAULT_SMTP_PORT = 587
DEFAULT_SMTP_TIMEOUT_SECONDS = 15.0

# File locations
DEFAULT_STORE_FILE = "data/db.json"
DEFAULT_LOG_DIRECTORY = "logs/latest_log"
