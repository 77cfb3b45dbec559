"""
Signed write handles for raw uploads
"""
import secrets
import time
from typing import Dict

from ..addressing import raw_key
from ..logger import upload_logger as logger
from .object_store import ObjectStore


def generate_upload_id() -> str:
    """Millisecond timestamp plus a random suffix"""
    return f"{int(time.time() * 1000)}{secrets.token_hex(4)}"


class UploadService:
    """Issues time-limited write URLs scoped to raw/<upload_id>.jpg"""

    def __init__(self, store: ObjectStore, expiry_seconds: int):
        self.store = store
        self.expiry_seconds = expiry_seconds

    def issue_write_handle(self) -> Dict[str, str]:
        """
        Returns:
            {'photoKey': upload id, 'uploadURL': presigned PUT URL}
        """
        upload_id = generate_upload_id()
        key = raw_key(upload_id)
        upload_url = self.store.presigned_put_url(key, self.expiry_seconds)

        logger.log_service_operation(
            "issue_write_handle",
            upload_id=upload_id,
            raw_key=key,
            expiry_seconds=self.expiry_seconds
        )
        return {
            'photoKey': upload_id,
            'uploadURL': upload_url
        }
