"""Utility functions for the completion compatibility adapter."""

import logging
import sys
import time
import uuid
from typing import Optional


def setup_logging(log_level: str = "INFO") -> None:
    """Setup application logging."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def generate_request_id() -> str:
    """Generate a unique request ID."""
    return str(uuid.uuid4())


def current_timestamp() -> int:
    """Get current wall-clock time in whole seconds."""
    return int(time.time())


def classify_error(error_message: str, status_code: Optional[int] = None) -> str:
    """Classify and format backend error messages."""
    error_lower = error_message.lower()

    if status_code == 401:
        return "Invalid API key. Please check your credentials."
    elif status_code == 403:
        return "Access to the backend was denied."
    elif status_code == 404:
        return "Backend endpoint or model not found."
    elif status_code == 429:
        return "Rate limit exceeded. Please try again later."
    elif status_code == 400:
        return "Bad request. Please check your input parameters."
    elif status_code is not None and status_code >= 500:
        return "Backend server error. Please try again later."
    elif "timeout" in error_lower:
        return "Request timeout. Please try again."
    elif "connection" in error_lower or "connect" in error_lower:
        return "Connection error. Please check your network."
    else:
        return f"Backend error: {error_message}"
