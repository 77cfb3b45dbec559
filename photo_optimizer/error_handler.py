"""
Error handling utilities for the photo optimizer handlers
"""
import json
from typing import Dict, Any
from botocore.exceptions import ClientError, BotoCoreError

from .constants import HTTPConstants
from .exceptions import (
    PhotoOptimizerError, BadRequestError, NotFoundError, StoreAccessError,
    ToolchainUnavailableError, OptimizationFailedError,
    CdnInvalidationFailedError, ConfigurationError
)
from .logger import logger


class AWSErrorHandler:
    """
    Maps pipeline and AWS errors to Lambda proxy responses
    """

    STATUS_BY_ERROR = {
        BadRequestError: HTTPConstants.BAD_REQUEST,
        NotFoundError: HTTPConstants.NOT_FOUND,
        StoreAccessError: HTTPConstants.INTERNAL_SERVER_ERROR,
        ToolchainUnavailableError: HTTPConstants.INTERNAL_SERVER_ERROR,
        OptimizationFailedError: HTTPConstants.INTERNAL_SERVER_ERROR,
        CdnInvalidationFailedError: HTTPConstants.BAD_GATEWAY,
        ConfigurationError: HTTPConstants.INTERNAL_SERVER_ERROR,
    }

    @staticmethod
    def handle_service_error(error: PhotoOptimizerError) -> Dict[str, Any]:
        """
        Handle errors raised by the pipeline services

        Client errors (4xx) carry their message; server errors are reported
        generically and logged with full detail.
        """
        status_code = HTTPConstants.INTERNAL_SERVER_ERROR
        for error_type, status in AWSErrorHandler.STATUS_BY_ERROR.items():
            if isinstance(error, error_type):
                status_code = status
                break

        if status_code < HTTPConstants.INTERNAL_SERVER_ERROR:
            logger.info("Request rejected", **error.to_dict())
            return {
                'success': False,
                'error_type': error.error_code,
                'error_message': error.message,
                'status_code': status_code,
                'retryable': False
            }

        logger.error("Pipeline error", error=error, **error.to_dict())
        return {
            'success': False,
            'error_type': error.error_code,
            'error_message': 'Photo optimization failed',
            'status_code': status_code,
            'retryable': True
        }

    @staticmethod
    def handle_s3_error(error: Exception, operation: str, bucket_name: str = None, key: str = None) -> Dict[str, Any]:
        """
        Handle raw botocore errors that escaped the services
        """
        error_context = {
            'operation': operation,
            'bucket_name': bucket_name or 'unknown',
            's3_key': key or 'unknown',
            'error_type': type(error).__name__,
            'error_message': str(error)
        }

        if isinstance(error, ClientError):
            error_code = error.response.get('Error', {}).get('Code', 'Unknown')
            error_context['aws_error_code'] = error_code

            logger.error("S3 ClientError", error=error, **error_context)

            if error_code in ['SlowDown', 'RequestLimitExceeded', 'ThrottlingException']:
                return {
                    'success': False,
                    'error_type': 'ThrottlingError',
                    'error_message': 'Storage service is busy. Please try again.',
                    'status_code': HTTPConstants.TOO_MANY_REQUESTS,
                    'retryable': True
                }
            return {
                'success': False,
                'error_type': 'StorageError',
                'error_message': f'Storage error: {error_code}',
                'status_code': HTTPConstants.INTERNAL_SERVER_ERROR,
                'retryable': True
            }

        if isinstance(error, BotoCoreError):
            logger.error("AWS client error", error=error, **error_context)
            return {
                'success': False,
                'error_type': 'StorageError',
                'error_message': 'Storage service unavailable',
                'status_code': HTTPConstants.SERVICE_UNAVAILABLE,
                'retryable': True
            }

        logger.error("Unexpected error", error=error, **error_context)
        return {
            'success': False,
            'error_type': 'InternalError',
            'error_message': 'Internal server error occurred',
            'status_code': HTTPConstants.INTERNAL_SERVER_ERROR,
            'retryable': False
        }

    @staticmethod
    def create_lambda_error_response(error_data: Dict[str, Any], event: dict = None) -> Dict[str, Any]:
        """
        Create Lambda-compatible error response

        Args:
            error_data: Error data from handle_* methods
            event: Original Lambda event for context

        Returns:
            Lambda proxy integration response
        """
        response_body = {
            'success': error_data['success'],
            'error': error_data['error_message'],
            'error_type': error_data['error_type'],
            'retryable': error_data.get('retryable', False)
        }

        return {
            'statusCode': error_data['status_code'],
            'headers': {
                HTTPConstants.CONTENT_TYPE: HTTPConstants.JSON,
                'Access-Control-Allow-Origin': '*',
                'Access-Control-Allow-Headers': 'Content-Type,X-Amz-Date,Authorization,X-Api-Key,X-Amz-Security-Token',
                'Access-Control-Allow-Methods': 'GET,OPTIONS'
            },
            'body': json.dumps(response_body)
        }


# Global error handler instance
error_handler = AWSErrorHandler()
