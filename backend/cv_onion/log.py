import logging
import sys
from typing import Optional


def configure_logging(service_name: str, level: Optional[str] = None) -> None:
    """
    Configure root logging for the service.
    Safe to call multiple times (basicConfig only applies once per process).
    """
    logging.basicConfig(
        level=(level or "INFO").upper(),
        format=(
            "%(asctime)s | %(levelname)s | %(name)s | "
            f"service={service_name} | %(message)s"
        ),
        stream=sys.stdout,
    )

    logging.getLogger(__name__).info("Logging configured for service=%s", service_name)
