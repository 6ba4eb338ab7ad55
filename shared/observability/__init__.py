from .setup import setup_observability, configure_logging
from .metrics import (
    storefront_orders_placed_total,
    storefront_payment_events_total,
    storefront_store_fallback_total,
    storefront_checkout_duration_seconds,
)
