# Pipeline services
from .object_store import ObjectStore
from .existence_oracle import ExistenceOracle
from .cache_invalidator import CacheInvalidator
from .pipeline import PipelineOrchestrator
from .upload_service import UploadService

__all__ = [
    'ObjectStore', 'ExistenceOracle', 'CacheInvalidator',
    'PipelineOrchestrator', 'UploadService'
]
