"""
Photo Optimizer Exceptions
Custom exception classes for pipeline operations
"""


class PhotoOptimizerError(Exception):
    """Base exception for all photo optimizer errors"""

    def __init__(self, message: str, error_code: str = None, details: dict = None):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert exception to dictionary for API responses"""
        result = {
            'error': self.__class__.__name__,
            'message': self.message
        }
        if self.error_code:
            result['error_code'] = self.error_code
        if self.details:
            result['details'] = self.details
        return result


class BadRequestError(PhotoOptimizerError):
    """Raised when a required request parameter is missing or malformed"""

    def __init__(self, message: str, parameter: str = None):
        self.parameter = parameter

        details = {}
        if parameter:
            details['parameter'] = parameter

        super().__init__(message, 'BAD_REQUEST', details)


class NotFoundError(PhotoOptimizerError):
    """Raised when the raw upload is absent at request time"""

    def __init__(self, key: str, bucket: str = None):
        self.key = key
        self.bucket = bucket

        details = {'key': key}
        if bucket:
            details['bucket'] = bucket

        super().__init__(f"Object '{key}' not found", 'NOT_FOUND', details)


class StoreAccessError(PhotoOptimizerError):
    """Raised when an object store call fails for any reason other than absence"""

    def __init__(self, message: str, operation: str = None, bucket: str = None,
                 key: str = None, aws_error_code: str = None):
        self.operation = operation
        self.bucket = bucket
        self.key = key
        self.aws_error_code = aws_error_code

        details = {}
        if operation:
            details['operation'] = operation
        if bucket:
            details['bucket'] = bucket
        if key:
            details['key'] = key
        if aws_error_code:
            details['aws_error_code'] = aws_error_code

        super().__init__(message, 'STORE_ACCESS_ERROR', details)


class ToolchainUnavailableError(PhotoOptimizerError):
    """Raised when the optimizer executable cannot be prepared"""

    def __init__(self, message: str, archive: str = None, original_error: str = None):
        self.archive = archive
        self.original_error = original_error

        details = {}
        if archive:
            details['archive'] = archive
        if original_error:
            details['original_error'] = original_error

        super().__init__(message, 'TOOLCHAIN_UNAVAILABLE', details)


class OptimizationFailedError(PhotoOptimizerError):
    """Raised when the optimizer exits non-zero or cannot be launched"""

    def __init__(self, message: str, path: str = None, returncode: int = None, stderr: str = None):
        self.path = path
        self.returncode = returncode
        self.stderr = stderr

        details = {}
        if path:
            details['path'] = path
        if returncode is not None:
            details['returncode'] = returncode
        if stderr:
            details['stderr'] = stderr

        super().__init__(message, 'OPTIMIZATION_FAILED', details)


class CdnInvalidationFailedError(PhotoOptimizerError):
    """Raised when the CDN rejects or fails an invalidation request"""

    def __init__(self, message: str, distribution_id: str = None, paths: list = None,
                 aws_error_code: str = None):
        self.distribution_id = distribution_id
        self.paths = paths or []
        self.aws_error_code = aws_error_code

        details = {}
        if distribution_id:
            details['distribution_id'] = distribution_id
        if paths:
            details['paths'] = paths
        if aws_error_code:
            details['aws_error_code'] = aws_error_code

        super().__init__(message, 'CDN_INVALIDATION_FAILED', details)


class ConfigurationError(PhotoOptimizerError):
    """Raised when configuration is invalid or missing"""

    def __init__(self, message: str, config_key: str = None, config_source: str = None):
        self.config_key = config_key
        self.config_source = config_source

        details = {}
        if config_key:
            details['config_key'] = config_key
        if config_source:
            details['config_source'] = config_source

        super().__init__(message, 'CONFIGURATION_ERROR', details)
