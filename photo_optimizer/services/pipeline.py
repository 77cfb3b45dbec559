"""
Content-addressed optimize-and-publish pipeline
Handles download, deduplication, optimization, publication and cleanup
"""
import os
from typing import Iterable, List, Optional

from ..addressing import fingerprint_file, publish_key
from ..constants import HashConstants, KeyConstants
from ..logger import pipeline_logger as logger
from ..models.upload import UploadReference, PipelineResult, BatchResult
from ..processors.optimizer import OptimizerToolchain
from .object_store import ObjectStore
from .existence_oracle import ExistenceOracle
from .cache_invalidator import CacheInvalidator


class PipelineOrchestrator:
    """
    Drives one raw upload through download -> dedup check -> optimize ->
    publish -> cleanup, and folds batches of uploads into a single CDN
    invalidation.

    Published objects are immutable: a fingerprint that already exists
    under photo/ is never optimized or uploaded again.
    """

    def __init__(
        self,
        store: ObjectStore,
        oracle: ExistenceOracle,
        toolchain: OptimizerToolchain,
        invalidator: Optional[CacheInvalidator] = None,
        work_dir: str = '/tmp',
        hash_algorithm: str = HashConstants.MD5
    ):
        self.store = store
        self.oracle = oracle
        self.toolchain = toolchain
        self.invalidator = invalidator
        self.work_dir = work_dir
        self.hash_algorithm = hash_algorithm

    def local_path(self, reference: UploadReference) -> str:
        return os.path.join(self.work_dir, reference.basename)

    def process_one(self, reference: UploadReference) -> PipelineResult:
        """
        Optimize and publish a single raw upload

        The local work file and the raw object are removed on every exit
        path. If cleanup fails after an earlier failure, the earlier
        exception is the one raised and the cleanup errors are attached to
        it as notes.

        Args:
            reference: Raw upload to process

        Returns:
            PipelineResult; result.publish_key is photo/<fingerprint>.jpg

        Raises:
            StoreAccessError, ToolchainUnavailableError, OptimizationFailedError
        """
        local_path = self.local_path(reference)
        logger.log_service_operation("process_upload", raw_key=reference.key, local_path=local_path)

        failure = None
        try:
            return self._optimize_and_publish(reference, local_path)
        except BaseException as e:
            failure = e
            raise
        finally:
            self._release(reference, local_path, failure)

    def _optimize_and_publish(self, reference: UploadReference, local_path: str) -> PipelineResult:
        self.store.download(reference.key, local_path)
        original_size = os.path.getsize(local_path)

        digest = fingerprint_file(local_path, self.hash_algorithm)
        target_key = publish_key(digest)

        if self.oracle.exists(target_key):
            logger.info("Duplicate upload, skipping optimization",
                        raw_key=reference.key,
                        publish_key=target_key)
            return PipelineResult(
                raw_key=reference.key,
                publish_key=target_key,
                fingerprint=digest,
                duplicate=True,
                original_size=original_size
            )

        self.toolchain.ensure_ready()
        self.toolchain.run(local_path)
        optimized_size = os.path.getsize(local_path)

        self.store.upload(local_path, target_key, KeyConstants.JPEG_CONTENT_TYPE)

        result = PipelineResult(
            raw_key=reference.key,
            publish_key=target_key,
            fingerprint=digest,
            duplicate=False,
            original_size=original_size,
            optimized_size=optimized_size
        )
        logger.log_service_operation(
            "photo_published",
            raw_key=reference.key,
            publish_key=target_key,
            size_reduction=result.size_reduction
        )
        return result

    def _release(self, reference: UploadReference, local_path: str,
                 failure: Optional[BaseException]) -> None:
        """Delete the work file and the raw object, keeping failure primary"""
        cleanup_errors: List[Exception] = []

        try:
            if os.path.exists(local_path):
                os.remove(local_path)
        except OSError as e:
            cleanup_errors.append(e)
            logger.error("Failed to remove local work file", error=e, local_path=local_path)

        try:
            self.store.delete(reference.key)
        except Exception as e:
            cleanup_errors.append(e)
            logger.error("Failed to delete raw upload", error=e, raw_key=reference.key)

        if not cleanup_errors:
            return

        if failure is not None:
            for error in cleanup_errors:
                failure.add_note(f"cleanup also failed: {type(error).__name__}: {error}")
            return

        raise cleanup_errors[0]

    def process_batch(self, references: Iterable[UploadReference],
                      request_token: Optional[str] = None) -> BatchResult:
        """
        Process references sequentially, then invalidate once

        Any failure aborts the remaining references and skips the
        invalidation; redelivery of the triggering event is the retry.

        Args:
            references: Raw uploads from one storage notification
            request_token: Idempotency token for the invalidation request

        Returns:
            BatchResult with every reference's result and the invalidation id
        """
        references = list(references)
        batch = BatchResult()

        logger.log_service_operation("process_batch", reference_count=len(references))

        if references:
            # Extraction is invocation-wide, not per file
            self.toolchain.ensure_ready()

        for reference in references:
            batch.results.append(self.process_one(reference))

        if self.invalidator is not None and batch.results:
            batch.invalidation_id = self.invalidator.invalidate(batch.publish_keys, request_token)

        logger.log_service_operation(
            "process_batch_complete",
            processed_count=len(batch.results),
            duplicate_count=batch.duplicate_count,
            invalidation_id=batch.invalidation_id
        )
        return batch
