# lmsr_market/services/__init__.py

# Glue around the engine: the process-wide event channels and the market registry.
from .realtime import publish_event, log_event, attach_event_logger
from .registry import MarketRegistry
