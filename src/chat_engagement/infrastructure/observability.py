"""Logfire setup and tracing for chat engagement analysis.

Analysis stages are wrapped with ``traced`` so each run shows up as a tree of
spans when Logfire is configured. Without configuration the spans are no-ops
from the caller's point of view.
"""

import functools
import inspect
import logging
from typing import Any, Callable, Optional, TypeVar

import logfire

from .config import Settings, get_settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


def configure_logfire(settings: Optional[Settings] = None) -> None:
    """Configure and initialize Logfire with application settings.

    Args:
        settings: Settings to use; defaults to the cached environment settings
    """
    settings = settings or get_settings()
    config = settings.logfire

    if not config.enabled:
        logger.info("Logfire is disabled in configuration")
        return

    options = {
        "service_name": config.service_name,
        "environment": config.environment,
        "send_to_logfire": "if-token-present",
        "console": (
            logfire.ConsoleOptions(min_log_level=config.log_level.lower())
            if config.console_enabled
            else False
        ),
    }
    if config.token:
        options["token"] = config.token.get_secret_value()

    try:
        logfire.configure(**options)
        logger.info(f"Logfire configured successfully for {config.service_name}")
    except Exception as e:
        logger.error(f"Failed to configure Logfire: {e}")
        if settings.is_development:
            logger.warning("Continuing without Logfire in development mode")
        else:
            raise


def traced(
    name: Optional[str] = None, **extra_attributes: Any
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """Decorator to open a Logfire span around a function call.

    Arguments are not captured; message collections are too large to attach
    to spans.

    Args:
        name: Optional span name (defaults to module-qualified function name)
        **extra_attributes: Additional attributes to add to the span

    Returns:
        Decorated function
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        span_name = name or f"{func.__module__}.{func.__name__}"
        attributes = {"function": func.__name__, **extra_attributes}

        if inspect.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> T:
                with logfire.span(span_name, **attributes) as span:
                    try:
                        return await func(*args, **kwargs)
                    except Exception as e:
                        _record_error(span, e)
                        raise

            return async_wrapper

        @functools.wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> T:
            with logfire.span(span_name, **attributes) as span:
                try:
                    return func(*args, **kwargs)
                except Exception as e:
                    _record_error(span, e)
                    raise

        return sync_wrapper

    return decorator


def _record_error(span: Any, error: Exception) -> None:
    span.set_attribute("error", True)
    span.set_attribute("error_type", type(error).__name__)
    span.set_attribute("error_message", str(error))
