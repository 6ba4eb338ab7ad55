from prometheus_client import Counter, Histogram

# Business Metrics
storefront_orders_placed_total = Counter(
    "storefront_orders_placed_total",
    "Orders written to the order store",
    ["store"]  # Labels: 'database', 'memory'
)

storefront_payment_events_total = Counter(
    "storefront_payment_events_total",
    "Payment provider calls handled by the API",
    ["provider", "outcome"]  # Labels: provider='stripe'|'razorpay'
)

storefront_store_fallback_total = Counter(
    "storefront_store_fallback_total",
    "Operations served by the in-memory store because the database was unreachable",
    ["resource"]
)

storefront_checkout_duration_seconds = Histogram(
    "storefront_checkout_duration_seconds",
    "Server-side order placement duration in seconds"
)
