import uuid
from contextvars import ContextVar
from typing import Optional

# Correlation ID of the completion currently being processed
correlation_id_var: ContextVar[Optional[str]] = ContextVar('correlation_id', default=None)


def generate_correlation_id() -> str:
    """Generate a new correlation ID for request tracing."""
    return uuid.uuid4().hex


def get_correlation_id() -> Optional[str]:
    return correlation_id_var.get()


def set_correlation_id(correlation_id: Optional[str]):
    """Set the correlation ID, returning the token needed to reset it."""
    return correlation_id_var.set(correlation_id)


def reset_correlation_id(token) -> None:
    correlation_id_var.reset(token)
