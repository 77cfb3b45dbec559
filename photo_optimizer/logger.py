"""
CloudWatch logging utilities for the photo optimizer
"""
import json
import traceback
from datetime import datetime, timezone
from typing import Optional
from .config import config


class OptimizerLogger:
    """
    Structured logger with CloudWatch-friendly JSON output
    """

    SENSITIVE_KEYS = ('password', 'token', 'secret', 'authorization', 'uploadurl')

    def __init__(self, service_name: str = "photo-optimizer"):
        self.service_name = service_name
        self.environment = config.environment
        self._debug_enabled = None

    @property
    def debug_enabled(self) -> bool:
        # Resolved on first use so importing the logger never touches SSM
        if self._debug_enabled is None:
            self._debug_enabled = config.enable_debug_logging
        return self._debug_enabled

    def _log(self, level: str, message: str, **kwargs):
        """Internal log method with structured format"""
        log_entry = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': level.upper(),
            'service': self.service_name,
            'environment': self.environment,
            'message': message
        }

        if kwargs:
            log_entry.update(kwargs)

        # CloudWatch captures stdout
        print(json.dumps(log_entry, default=str))

    def debug(self, message: str, **kwargs):
        """Log debug message (only if debug enabled)"""
        if self.debug_enabled:
            self._log('debug', message, **kwargs)

    def info(self, message: str, **kwargs):
        self._log('info', message, **kwargs)

    def warning(self, message: str, **kwargs):
        self._log('warning', message, **kwargs)

    def error(self, message: str, error: Exception = None, **kwargs):
        """Log error message with optional exception details"""
        log_data = kwargs.copy()

        if error:
            log_data['error_type'] = type(error).__name__
            log_data['error_message'] = str(error)
            log_data['traceback'] = ''.join(
                traceback.format_exception(type(error), error, error.__traceback__)
            )

        self._log('error', message, **log_data)

    def log_lambda_start(self, function_name: str, event: dict, context=None):
        """Log Lambda function start"""
        log_data = {
            'function_name': function_name,
            'request_id': getattr(context, 'aws_request_id', 'unknown') if context else 'unknown',
            'event_keys': list(event.keys()) if isinstance(event, dict) else 'non-dict',
        }

        if isinstance(event, dict):
            safe_event = {}
            for key, value in event.items():
                if key.lower() in self.SENSITIVE_KEYS:
                    safe_event[key] = '[REDACTED]'
                elif isinstance(value, (str, int, float, bool)):
                    safe_event[key] = value
                elif key == 'Records' and isinstance(value, list):
                    safe_event['record_count'] = len(value)
                else:
                    safe_event[key] = type(value).__name__
            log_data['event'] = safe_event

        self._log('info', f"Lambda function {function_name} started", **log_data)

    def log_lambda_end(self, function_name: str, success: bool = True, duration_ms: float = None, **kwargs):
        """Log Lambda function completion"""
        log_data = {
            'function_name': function_name,
            'success': success,
        }

        if duration_ms is not None:
            log_data['duration_ms'] = round(duration_ms, 2)

        log_data.update(kwargs)

        level = 'info' if success else 'error'
        message = f"Lambda function {function_name} {'completed' if success else 'failed'}"

        self._log(level, message, **log_data)

    def log_service_operation(self, operation: str, **kwargs):
        """Log service operation"""
        log_data = {'operation': operation}
        log_data.update(kwargs)

        self._log('info', f"Service operation: {operation}", **log_data)

    def log_s3_operation(self, bucket_name: str, operation: str, key: str = None, success: bool = True, **kwargs):
        """Log S3 operation"""
        log_data = {
            'bucket_name': bucket_name,
            'operation': operation,
            'success': success
        }

        if key:
            log_data['s3_key'] = key

        log_data.update(kwargs)

        level = 'info' if success else 'error'
        message = f"S3 {operation} on {bucket_name} {'succeeded' if success else 'failed'}"

        self._log(level, message, **log_data)

    def log_cdn_operation(self, distribution_id: str, operation: str, success: bool = True,
                          paths: Optional[list] = None, **kwargs):
        """Log CloudFront operation"""
        log_data = {
            'distribution_id': distribution_id,
            'operation': operation,
            'success': success
        }

        if paths is not None:
            log_data['path_count'] = len(paths)
            log_data['paths'] = paths

        log_data.update(kwargs)

        level = 'info' if success else 'error'
        message = f"CloudFront {operation} on {distribution_id} {'succeeded' if success else 'failed'}"

        self._log(level, message, **log_data)

    def log_toolchain_operation(self, operation: str, binary_path: str, success: bool = True, **kwargs):
        """Log optimizer toolchain operation"""
        log_data = {
            'operation': operation,
            'binary_path': binary_path,
            'success': success
        }
        log_data.update(kwargs)

        level = 'info' if success else 'error'
        message = f"Toolchain {operation} {'succeeded' if success else 'failed'}"

        self._log(level, message, **log_data)


# Global logger instances
logger = OptimizerLogger("photo-optimizer")
pipeline_logger = OptimizerLogger("optimize-pipeline")
upload_logger = OptimizerLogger("upload-service")
