"""
S3 object store access for the optimizer pipeline
"""
from typing import Dict, Any, Optional
import boto3
from boto3.s3.transfer import TransferConfig
from botocore.exceptions import ClientError, BotoCoreError

from ..constants import KeyConstants
from ..exceptions import StoreAccessError
from ..logger import logger


def aws_error_code(error: Exception) -> Optional[str]:
    """Extract the AWS error code from a botocore ClientError"""
    if isinstance(error, ClientError):
        return error.response.get('Error', {}).get('Code')
    return None


class ObjectStore:
    """
    Thin wrapper over the S3 client used by the pipeline

    Every botocore failure surfaces as StoreAccessError; callers that need
    to interpret specific codes (see ExistenceOracle) use head() directly.
    """

    def __init__(self, bucket_name: str, s3_client=None, transfer_config: TransferConfig = None):
        self.bucket_name = bucket_name
        self._s3_client = s3_client
        self.transfer_config = transfer_config

    @property
    def s3_client(self):
        """Lazy initialization of S3 client"""
        if self._s3_client is None:
            self._s3_client = boto3.client('s3')
        return self._s3_client

    def _store_error(self, error: Exception, operation: str, key: str = None) -> StoreAccessError:
        code = aws_error_code(error)
        logger.log_s3_operation(
            self.bucket_name, operation, key, False,
            aws_error_code=code, error_message=str(error)
        )
        return StoreAccessError(
            f"S3 {operation} failed for {key or self.bucket_name}: {code or type(error).__name__}",
            operation=operation,
            bucket=self.bucket_name,
            key=key,
            aws_error_code=code
        )

    def head(self, key: str) -> Dict[str, Any]:
        """
        Fetch object metadata

        Raises:
            ClientError: Untranslated, so the caller can inspect the code
        """
        return self.s3_client.head_object(Bucket=self.bucket_name, Key=key)

    def download(self, key: str, local_path: str) -> None:
        """Stream an object to local_path"""
        try:
            self.s3_client.download_file(
                self.bucket_name, key, local_path, Config=self.transfer_config
            )
        except (ClientError, BotoCoreError) as e:
            raise self._store_error(e, 'download', key) from e

        logger.log_s3_operation(self.bucket_name, 'download', key, True)

    def upload(self, local_path: str, key: str,
               content_type: str = KeyConstants.JPEG_CONTENT_TYPE) -> None:
        """Stream local_path to key with the given content type"""
        try:
            self.s3_client.upload_file(
                local_path, self.bucket_name, key,
                ExtraArgs={'ContentType': content_type},
                Config=self.transfer_config
            )
        except (ClientError, BotoCoreError) as e:
            raise self._store_error(e, 'upload', key) from e

        logger.log_s3_operation(self.bucket_name, 'upload', key, True, content_type=content_type)

    def delete(self, key: str) -> None:
        try:
            self.s3_client.delete_object(Bucket=self.bucket_name, Key=key)
        except (ClientError, BotoCoreError) as e:
            raise self._store_error(e, 'delete', key) from e

        logger.log_s3_operation(self.bucket_name, 'delete', key, True)

    def presigned_put_url(self, key: str, expiry_seconds: int) -> str:
        """Time-limited write URL scoped to a single key"""
        try:
            return self.s3_client.generate_presigned_url(
                'put_object',
                Params={'Bucket': self.bucket_name, 'Key': key},
                ExpiresIn=expiry_seconds
            )
        except (ClientError, BotoCoreError) as e:
            raise self._store_error(e, 'presign_put', key) from e
