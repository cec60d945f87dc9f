from prometheus_client import Counter, Gauge

ORDERS_CREATED = Counter(
    "orders_created_total",
    "Orders accepted at checkout",
)

ORDER_STATUS_UPDATES = Counter(
    "order_status_updates_total",
    "Order status changes by target status",
    ["status"],
)

ORDERS_DELETED = Counter(
    "orders_deleted_total",
    "Delivered orders removed from the kitchen list",
)

KITCHEN_CONNECTIONS = Gauge(
    "kitchen_connections",
    "Kitchen displays currently connected",
)

KITCHEN_PUSHES = Counter(
    "kitchen_pushes_total",
    "Kitchen order snapshots pushed, per connection",
    ["outcome"],  # sent | dropped
)
