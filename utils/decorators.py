#!/usr/bin/env python3
"""
Decorators for the Brand Elasticity package.

This module provides decorators for:
- Error handling
- Performance timing
"""

import time
import functools
import traceback
from typing import Any, Callable, List, Optional, Type, TypeVar, Union, cast

from utils.logging_utils import logger, log_step

F = TypeVar('F', bound=Callable[..., Any])

__all__ = ['log_errors', 'timed', 'log_step']


def log_errors(expected_exceptions: Union[Type[Exception], List[Type[Exception]]] = Exception,
               msg: str = "Error in {func_name}",
               reraise: bool = True,
               default_return: Any = None) -> Callable[[F], F]:
    """
    Decorator to catch and log exceptions.

    Args:
        expected_exceptions: Exception type or a list of exception types to catch. Defaults to Exception.
        msg: Message template for logging errors. {func_name} will be replaced.
        reraise: Whether to re-raise the exception after logging.
        default_return: Value to return in case of exception (if not re-raising).

    Returns:
        Decorated function that logs errors
    """
    if not isinstance(expected_exceptions, (list, tuple)):
        exceptions_to_check = (expected_exceptions,)
    else:
        exceptions_to_check = tuple(expected_exceptions)

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return func(*args, **kwargs)
            except exceptions_to_check as e:
                formatted_msg = msg.format(func_name=func.__name__)
                logger.error(f"{formatted_msg}: {str(e)}")
                logger.debug("Traceback:\n" + traceback.format_exc())

                if reraise:
                    raise
                return default_return

        return cast(F, wrapper)
    return decorator


def timed(*args: Any, log_level: str = "info", step_name: Optional[str] = None) -> Any:
    """
    Decorator to time function execution and log the result.

    Can be used with or without parameters:

    @timed
    def my_func():
        ...

    or

    @timed("Model fitting")
    def my_func():
        ...

    Args:
        log_level: Logging level to use (debug, info, warning, error).
        step_name: Optional step name. If not provided, the function name is used.

    Returns:
        Decorated function that logs timing information
    """
    def make_wrapper(f: Callable[..., Any], name: str) -> Callable[..., Any]:
        @functools.wraps(f)
        def wrapper(*w_args: Any, **w_kwargs: Any) -> Any:
            start = time.time()
            try:
                return f(*w_args, **w_kwargs)
            finally:
                elapsed = time.time() - start
                getattr(logger, log_level.lower())(f"{name} executed in {elapsed:.2f} seconds")
        return wrapper

    # Used as a bare decorator: @timed
    if len(args) == 1 and callable(args[0]):
        f = args[0]
        return make_wrapper(f, step_name or f.__name__)

    provided_step_name = args[0] if args and isinstance(args[0], str) else step_name

    def decorator(f: Callable[..., Any]) -> Callable[..., Any]:
        return make_wrapper(f, provided_step_name or f.__name__)
    return decorator
