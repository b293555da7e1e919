"""Prometheus collectors for HTTP traffic and inventory activity."""
import os

from prometheus_client import Counter, Histogram, Gauge, CollectorRegistry, REGISTRY, multiprocess

# Check if running in multi-process mode (Gunicorn)
MULTIPROCESS_MODE = os.environ.get('PROMETHEUS_MULTIPROC_DIR') is not None

if MULTIPROCESS_MODE:
    registry = CollectorRegistry()
    multiprocess.MultiProcessCollector(registry)
else:
    registry = REGISTRY

# Collectors register on the default registry; the multiprocess collector reads them from disk
_collector_registry = registry if not MULTIPROCESS_MODE else None

# HTTP Request Metrics
http_requests_total = Counter(
    'http_requests_total',
    'Total HTTP requests',
    ['method', 'endpoint', 'http_status'],
    registry=_collector_registry
)

http_request_duration_seconds = Histogram(
    'http_request_duration_seconds',
    'HTTP request latency in seconds',
    ['method', 'endpoint'],
    registry=_collector_registry,
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0)
)

http_requests_in_flight = Gauge(
    'http_requests_in_flight',
    'Number of HTTP requests currently being processed',
    registry=_collector_registry
)

# Inventory Metrics
stock_movements_total = Counter(
    'stock_movements_total',
    'Committed stock movements',
    ['stock_item_kind', 'movement_type'],
    registry=_collector_registry
)

productions_total = Counter(
    'productions_total',
    'Committed productions',
    registry=_collector_registry
)

insufficient_stock_total = Counter(
    'insufficient_stock_rejections_total',
    'Operations rejected because a balance would go negative',
    ['stock_item_kind'],
    registry=_collector_registry
)
