"""
Object existence checks without list permission
"""
from botocore.exceptions import ClientError, BotoCoreError

from ..constants import StoreConstants
from ..exceptions import StoreAccessError
from ..logger import logger
from .object_store import ObjectStore, aws_error_code


class ExistenceOracle:
    """
    Answers "is this key already in the bucket?" with a HEAD probe

    The optimizer role may read and head objects but not list the bucket,
    so S3 reports a missing key as 403 instead of 404. A 403 therefore
    means "absent" here. A key that exists but is genuinely forbidden is
    indistinguishable and is also reported absent.
    """

    def __init__(self, store: ObjectStore):
        self.store = store

    def exists(self, key: str) -> bool:
        """
        Raises:
            StoreAccessError: For any error other than the access-denial signal,
                including 404
        """
        try:
            self.store.head(key)
        except ClientError as e:
            code = aws_error_code(e)
            if code in StoreConstants.ABSENT_ERROR_CODES:
                logger.debug("Object absent (denied HEAD)", key=key, aws_error_code=code)
                return False
            logger.log_s3_operation(
                self.store.bucket_name, 'head', key, False, aws_error_code=code
            )
            raise StoreAccessError(
                f"S3 head failed for {key}: {code}",
                operation='head',
                bucket=self.store.bucket_name,
                key=key,
                aws_error_code=code
            ) from e
        except BotoCoreError as e:
            raise StoreAccessError(
                f"S3 head failed for {key}: {type(e).__name__}",
                operation='head',
                bucket=self.store.bucket_name,
                key=key
            ) from e

        return True
