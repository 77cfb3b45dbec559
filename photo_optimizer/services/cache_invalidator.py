"""
CloudFront cache invalidation for published photos
"""
import time
from typing import Iterable, Optional
import boto3
from botocore.exceptions import ClientError, BotoCoreError

from ..addressing import invalidation_path
from ..exceptions import CdnInvalidationFailedError
from ..logger import logger
from .object_store import aws_error_code


class CacheInvalidator:
    """Submits one invalidation request per batch of published keys"""

    def __init__(self, distribution_id: str, cloudfront_client=None):
        self.distribution_id = distribution_id
        self._cloudfront_client = cloudfront_client

    @property
    def cloudfront_client(self):
        """Lazy initialization of CloudFront client"""
        if self._cloudfront_client is None:
            self._cloudfront_client = boto3.client('cloudfront')
        return self._cloudfront_client

    @staticmethod
    def caller_reference(token: Optional[str] = None) -> str:
        """
        Uniqueness token for the request

        A request-derived token lets CloudFront fold a redelivered
        invocation into the original invalidation; without one the current
        time is used and duplicates are not suppressed.
        """
        if token:
            return token
        return str(int(time.time() * 1000))

    def invalidate(self, keys: Iterable[str], token: Optional[str] = None) -> Optional[str]:
        """
        Invalidate every given key in a single request

        Args:
            keys: Published object keys (with or without a leading slash)
            token: Optional idempotency token used as CallerReference

        Returns:
            CloudFront invalidation id, or None when there was nothing to invalidate

        Raises:
            CdnInvalidationFailedError: If CloudFront rejects the request
        """
        paths = sorted({invalidation_path(key) for key in keys})
        if not paths:
            logger.info("No paths to invalidate", distribution_id=self.distribution_id)
            return None

        caller_reference = self.caller_reference(token)

        try:
            response = self.cloudfront_client.create_invalidation(
                DistributionId=self.distribution_id,
                InvalidationBatch={
                    'Paths': {
                        'Quantity': len(paths),
                        'Items': paths
                    },
                    'CallerReference': caller_reference
                }
            )
        except (ClientError, BotoCoreError) as e:
            code = aws_error_code(e)
            logger.log_cdn_operation(
                self.distribution_id, 'create_invalidation', False, paths,
                aws_error_code=code, error_message=str(e)
            )
            raise CdnInvalidationFailedError(
                f"CloudFront invalidation failed: {code or type(e).__name__}",
                distribution_id=self.distribution_id,
                paths=paths,
                aws_error_code=code
            ) from e

        invalidation_id = response['Invalidation']['Id']
        logger.log_cdn_operation(
            self.distribution_id, 'create_invalidation', True, paths,
            invalidation_id=invalidation_id,
            caller_reference=caller_reference
        )
        return invalidation_id
