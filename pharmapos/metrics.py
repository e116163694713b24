"""
Prometheus registry and invoice engine counters.

Services import their counters from here; the metrics blueprint only
exposes the registry and records HTTP request metrics.
"""
from prometheus_client import Counter, CollectorRegistry, multiprocess, REGISTRY
import os

# Check if running in multi-process mode (Gunicorn)
MULTIPROCESS_MODE = os.environ.get('PROMETHEUS_MULTIPROC_DIR') is not None

if MULTIPROCESS_MODE:
    registry = CollectorRegistry()
    multiprocess.MultiProcessCollector(registry)
else:
    registry = REGISTRY

# Multiprocess values are written to PROMETHEUS_MULTIPROC_DIR, not to a registry
metric_registry = registry if not MULTIPROCESS_MODE else None

invoices_finalized_total = Counter(
    'pos_invoices_finalized_total',
    'Invoices successfully finalized',
    registry=metric_registry
)

finalize_failures_total = Counter(
    'pos_finalize_failures_total',
    'Rejected or failed finalize attempts',
    ['reason'],
    registry=metric_registry
)
