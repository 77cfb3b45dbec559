"""
Service container for dependency injection

Services are built lazily and kept for the lifetime of the worker, which is
what lets a warm Lambda reuse its S3/CloudFront clients and unpacked toolchain.
"""
import os
from typing import Dict, Any

from ..config import config
from ..processors.optimizer import OptimizerToolchain
from .object_store import ObjectStore
from .existence_oracle import ExistenceOracle
from .cache_invalidator import CacheInvalidator
from .pipeline import PipelineOrchestrator
from .upload_service import UploadService


class ServiceContainer:
    """
    Simple service container for dependency injection
    Provides lazy loading of services to avoid circular imports
    """

    def __init__(self):
        self._services: Dict[str, Any] = {}

    def get_service(self, service_name: str):
        """
        Get service instance with lazy initialization

        Raises:
            ValueError: If service is not registered
        """
        if service_name not in self._services:
            self._services[service_name] = self._create_service(service_name)

        return self._services[service_name]

    def _create_service(self, service_name: str):
        if service_name == 'object_store':
            return ObjectStore(config.bucket_name)
        elif service_name == 'existence_oracle':
            return ExistenceOracle(self.get_service('object_store'))
        elif service_name == 'optimizer_toolchain':
            archive = config.toolchain_archive
            if not os.path.isabs(archive):
                archive = os.path.join(os.environ.get('LAMBDA_TASK_ROOT', os.getcwd()), archive)
            return OptimizerToolchain(
                archive_path=archive,
                install_root=config.toolchain_install_root,
                binary_relpath=config.toolchain_binary,
                quality=config.jpeg_quality
            )
        elif service_name == 'cache_invalidator':
            return CacheInvalidator(config.distribution_id)
        elif service_name == 'pipeline':
            return PipelineOrchestrator(
                store=self.get_service('object_store'),
                oracle=self.get_service('existence_oracle'),
                toolchain=self.get_service('optimizer_toolchain'),
                work_dir=config.work_dir,
                hash_algorithm=config.hash_algorithm
            )
        elif service_name == 'batch_pipeline':
            return PipelineOrchestrator(
                store=self.get_service('object_store'),
                oracle=self.get_service('existence_oracle'),
                toolchain=self.get_service('optimizer_toolchain'),
                invalidator=self.get_service('cache_invalidator'),
                work_dir=config.work_dir,
                hash_algorithm=config.hash_algorithm
            )
        elif service_name == 'upload_service':
            return UploadService(self.get_service('object_store'), config.upload_url_expiry)
        else:
            raise ValueError(f"Unknown service: {service_name}")

    def register_service(self, service_name: str, service_instance):
        self._services[service_name] = service_instance

    def clear_services(self):
        """Clear all cached services (useful for testing)"""
        self._services.clear()


# Global service container instance
_service_container = ServiceContainer()


def get_service(service_name: str):
    """Get service from global container"""
    return _service_container.get_service(service_name)


def register_service(service_name: str, service_instance):
    """Register service in global container"""
    _service_container.register_service(service_name, service_instance)


def clear_services():
    """Clear all services (useful for testing)"""
    _service_container.clear_services()
