"""Error handling utilities for the application."""

import functools
import logging
from typing import Callable, TypeVar, Any, Optional, Type
import traceback
import inspect
from fastapi import HTTPException

# Define a generic type for function return value
T = TypeVar('T')

logger = logging.getLogger(__name__)

CAPTCHA_DETECTED_MESSAGE = "CAPTCHA detected"

# Custom exceptions
class ImageSearchError(Exception):
    """Base class for all image search failures."""
    pass

class ScrapingError(ImageSearchError):
    """Generic browser-level failure (launch, navigation, evaluation)."""
    pass

class NavigationError(ScrapingError):
    """The page could not be navigated to the search URL."""
    pass

class BrowserSessionError(ScrapingError):
    """The browser or page could not be opened."""
    pass

class CaptchaDetectedError(ImageSearchError):
    """The upstream site served its block page instead of results."""

    def __init__(self, url: str = ""):
        self.url = url
        super().__init__(f"{CAPTCHA_DETECTED_MESSAGE}: {url}" if url else CAPTCHA_DETECTED_MESSAGE)

class CaptchaRetriesExhaustedError(ImageSearchError):
    """Every permitted attempt ran into the block page."""

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(f"CAPTCHA persisted through {attempts} attempts")


def handle_errors(
    error_message: str = "Operation failed",
    exception_to_raise: Type[Exception] = HTTPException,
    log_traceback: bool = True,
    return_value: Optional[Any] = None,
    reraise: bool = True,
    passthrough: tuple = (),
) -> Callable:
    """
    Decorator to handle errors in functions with standardized logging and error reporting.
    Handles both async and sync functions.

    Args:
        error_message: Base error message to log and include in exception
        exception_to_raise: Type of exception to raise (e.g., HTTPException, ScrapingError)
        log_traceback: Whether to log the full traceback
        return_value: Value to return if reraise is False
        reraise: Whether to raise the exception (True) or return return_value (False)
        passthrough: Exception types re-raised untouched and unlogged

    Returns:
        Decorated function
    """
    def _handle(e: Exception) -> Any:
        full_error = f"{error_message}: {str(e)}"
        if log_traceback:
            logger.error(f"{full_error}\n{traceback.format_exc()}")
        else:
            logger.error(full_error)

        if reraise:
            if exception_to_raise is HTTPException:
                if isinstance(e, HTTPException):
                    raise e
                raise HTTPException(status_code=500, detail=full_error)
            if isinstance(e, exception_to_raise):
                raise e
            raise exception_to_raise(full_error) from e
        return return_value

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        # Check if the original function is async
        is_async_func = inspect.iscoroutinefunction(func)

        # Define sync wrapper
        @functools.wraps(func)
        def sync_wrapper(*args, **kwargs) -> T:
            try:
                return func(*args, **kwargs)
            except passthrough:
                raise
            except Exception as e:
                return _handle(e)

        # Define async wrapper
        @functools.wraps(func)
        async def async_wrapper(*args, **kwargs) -> T:
            try:
                return await func(*args, **kwargs)
            except passthrough:
                raise
            except Exception as e:
                return _handle(e)

        # Return the correct wrapper based on whether func is async
        return async_wrapper if is_async_func else sync_wrapper
    return decorator


def handle_scraping_errors(
    error_message: str = "Scraping failed",
    exception_to_raise: Type[Exception] = ScrapingError,
) -> Callable:
    """
    Specialized decorator for browser operations.

    CAPTCHA signals pass through untouched so the retry loop can see them.

    Args:
        error_message: Base error message
        exception_to_raise: ScrapingError subclass to wrap failures in

    Returns:
        Decorated function
    """
    return handle_errors(
        error_message=error_message,
        exception_to_raise=exception_to_raise,
        log_traceback=True,
        reraise=True,
        passthrough=(CaptchaDetectedError,),
    )


def best_effort(error_message: str = "Best-effort operation failed", return_value: Optional[Any] = None) -> Callable:
    """
    Decorator for side tasks (debug artifacts) whose failure must not mask the real error.

    Args:
        error_message: Base error message
        return_value: Value returned when the wrapped call fails

    Returns:
        Decorated function
    """
    return handle_errors(
        error_message=error_message,
        log_traceback=False,
        return_value=return_value,
        reraise=False,
    )
