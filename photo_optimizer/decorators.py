"""
Lambda handler decorators for the photo optimizer
"""
import time
from functools import wraps
from typing import List, Callable
from botocore.exceptions import ClientError, BotoCoreError

from .constants import HTTPConstants
from .error_handler import error_handler
from .exceptions import PhotoOptimizerError
from .utils import create_error_response, get_query_parameter
from .logger import logger


def api_gateway_handler(
    required_params: List[str] = None,
    log_requests: bool = True
):
    """
    Decorator for HTTP API handlers

    Missing query-string parameters are rejected with 400 before the handler
    runs, so no AWS call is made for them. Pipeline errors are turned into
    proxy responses.

    Args:
        required_params: Query-string parameters that must be present
        log_requests: Whether to log request start/end
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(event, context):
            start_time = time.time()
            function_name = getattr(func, '__name__', 'unknown')

            if log_requests:
                logger.log_lambda_start(function_name, event, context)

            def finish(success: bool, **kwargs):
                if log_requests:
                    duration_ms = (time.time() - start_time) * 1000
                    logger.log_lambda_end(function_name, success, duration_ms, **kwargs)

            if required_params:
                missing = [name for name in required_params if get_query_parameter(event, name) is None]
                if missing:
                    finish(False, error='missing parameters', missing_params=missing)
                    return create_error_response(
                        HTTPConstants.BAD_REQUEST,
                        f'Missing required parameters: {", ".join(missing)}',
                        event,
                        {'missing_params': missing}
                    )

            try:
                result = func(event, context)
                finish(True)
                return result

            except PhotoOptimizerError as e:
                finish(False, error=e.message, error_code=e.error_code)
                error_data = error_handler.handle_service_error(e)
                return error_handler.create_lambda_error_response(error_data, event)

            except (ClientError, BotoCoreError) as e:
                finish(False, error=str(e))
                error_data = error_handler.handle_s3_error(e, function_name)
                return error_handler.create_lambda_error_response(error_data, event)

            except Exception as e:
                finish(False, error=str(e))
                logger.error(f"Unexpected error in {function_name}", error=e)
                return create_error_response(
                    HTTPConstants.INTERNAL_SERVER_ERROR,
                    'Internal server error occurred',
                    event
                )

        return wrapper
    return decorator


def s3_event_handler(log_requests: bool = True):
    """
    Decorator for storage-event handlers

    Failures are logged and re-raised so the asynchronous invocation is
    redelivered; nothing is converted into a response.
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(event, context):
            start_time = time.time()
            function_name = getattr(func, '__name__', 'unknown')

            if log_requests:
                logger.log_lambda_start(function_name, event, context)

            try:
                result = func(event, context)
            except Exception as e:
                if log_requests:
                    duration_ms = (time.time() - start_time) * 1000
                    logger.log_lambda_end(function_name, False, duration_ms, error=str(e))
                logger.error(f"Unhandled error in {function_name}", error=e)
                raise

            if log_requests:
                duration_ms = (time.time() - start_time) * 1000
                logger.log_lambda_end(function_name, True, duration_ms)
            return result

        return wrapper
    return decorator
