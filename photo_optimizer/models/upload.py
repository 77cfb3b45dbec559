"""
Upload and pipeline result models
"""
import os
from dataclasses import dataclass, field, asdict
from typing import List, Optional, Dict, Any

from ..constants import KeyConstants
from ..addressing import raw_key


@dataclass(frozen=True)
class UploadReference:
    """
    A raw upload waiting to be optimized

    Lives under raw/<upload_id>.jpg; read at most once by the pipeline and
    always deleted afterwards.
    """
    upload_id: str
    key: str

    @classmethod
    def from_upload_id(cls, upload_id: str) -> 'UploadReference':
        """
        Raises:
            ValueError: If upload_id is empty or would leave the raw/ namespace
        """
        if not upload_id:
            raise ValueError("upload_id must not be empty")
        if '/' in upload_id or '\\' in upload_id:
            raise ValueError(f"upload_id must not contain path separators: {upload_id}")
        return cls(upload_id=upload_id, key=raw_key(upload_id))

    @classmethod
    def from_key(cls, key: str) -> 'UploadReference':
        """
        Build a reference from a full object key, e.g. from a storage event

        Folder markers (raw/sub/) and non-JPEG objects are not uploads.

        Raises:
            ValueError: If the key is not a raw/ JPEG object
        """
        basename = key.rsplit('/', 1)[-1]
        if (not key.startswith(KeyConstants.RAW_PREFIX)
                or not basename
                or not basename.lower().endswith(KeyConstants.JPEG_SUFFIXES)):
            raise ValueError(f"Not a raw upload key: {key}")

        upload_id = key[len(KeyConstants.RAW_PREFIX):]
        if upload_id.endswith(KeyConstants.JPEG_SUFFIX):
            upload_id = upload_id[:-len(KeyConstants.JPEG_SUFFIX)]
        return cls(upload_id=upload_id, key=key)

    @property
    def basename(self) -> str:
        return os.path.basename(self.key)


@dataclass
class PipelineResult:
    """Outcome of processing one upload reference"""
    raw_key: str
    publish_key: str
    fingerprint: str
    duplicate: bool
    original_size: int
    optimized_size: Optional[int] = None

    @property
    def size_reduction(self) -> Optional[str]:
        if self.duplicate or not self.original_size or self.optimized_size is None:
            return None
        percent = round((1 - self.optimized_size / self.original_size) * 100, 1)
        return f"{percent}% (from {self.original_size} to {self.optimized_size} bytes)"

    def to_dict(self) -> Dict[str, Any]:
        result = asdict(self)
        result['size_reduction'] = self.size_reduction
        return result


@dataclass
class BatchResult:
    """Outcome of one storage-event batch"""
    results: List[PipelineResult] = field(default_factory=list)
    invalidation_id: Optional[str] = None

    @property
    def publish_keys(self) -> List[str]:
        return [r.publish_key for r in self.results]

    @property
    def duplicate_count(self) -> int:
        return sum(1 for r in self.results if r.duplicate)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'processed_count': len(self.results),
            'duplicate_count': self.duplicate_count,
            'publish_keys': self.publish_keys,
            'invalidation_id': self.invalidation_id,
            'results': [r.to_dict() for r in self.results]
        }
