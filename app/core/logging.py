import logging
import sys
from typing import Optional

from app.core.config import settings

store_logger = logging.getLogger("trace_inspector.store")

def configure_logging(level: Optional[str] = None) -> None:
    """
    Configure console logging for the service.

    Args:
        level: Overrides settings.log_level when given
    """
    root_logger = logging.getLogger()
    root_logger.setLevel((level or settings.log_level).upper())

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    formatter = logging.Formatter(
        fmt=f"%(asctime)s [%(levelname)s] [{settings.service_name}] [%(name)s] %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z"
    )
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    # Silence noise
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


def log_store_operation(
    operation: str,
    collection: str,
    duration_ms: float,
    error: Optional[BaseException] = None,
) -> None:
    """Log one trace store call with its timing."""
    if error is not None:
        store_logger.error(
            f"[STORE] {operation} on {collection} failed after {duration_ms:.1f}ms: "
            f"{type(error).__name__}: {error}"
        )
    else:
        store_logger.info(f"[STORE] {operation} on {collection} completed in {duration_ms:.1f}ms")
