"""
jpegoptim toolchain management
Unpacks the bundled optimizer once per worker and runs it on local files
"""
import os
import subprocess
import tarfile
from typing import List

from ..constants import OptimizerConstants
from ..exceptions import ToolchainUnavailableError, OptimizationFailedError
from ..logger import logger


class OptimizerToolchain:
    """
    Lossy JPEG recompression through an external jpegoptim binary

    The unpacked binary survives across invocations of a warm worker, so
    ensure_ready() only extracts when the executable is missing from its
    fixed path.
    """

    def __init__(
        self,
        archive_path: str,
        install_root: str = '/tmp',
        binary_relpath: str = 'bin/jpegoptim',
        quality: int = OptimizerConstants.DEFAULT_QUALITY,
        strip_components: int = OptimizerConstants.ARCHIVE_STRIP_COMPONENTS
    ):
        self.archive_path = archive_path
        self.install_root = install_root
        self.binary_path = os.path.join(install_root, binary_relpath)
        self.quality = quality
        self.strip_components = strip_components

    def is_ready(self) -> bool:
        return os.path.isfile(self.binary_path)

    def ensure_ready(self) -> bool:
        """
        Make sure the executable exists at binary_path

        Returns:
            True if the archive was extracted (cold start), False if the
            binary was already present (warm start)

        Raises:
            ToolchainUnavailableError: If the archive is missing or cannot
                be extracted
        """
        if self.is_ready():
            logger.debug("Optimizer toolchain already unpacked", binary_path=self.binary_path)
            return False

        if not os.path.isfile(self.archive_path):
            logger.log_toolchain_operation(
                "unpack", self.binary_path, False, archive=self.archive_path,
                reason="archive missing"
            )
            raise ToolchainUnavailableError(
                f"Optimizer archive not found: {self.archive_path}",
                archive=self.archive_path
            )

        try:
            os.makedirs(self.install_root, exist_ok=True)
            with tarfile.open(self.archive_path, 'r:*') as archive:
                members = self._stripped_members(archive)
                archive.extractall(self.install_root, members=members, filter='data')
        except (tarfile.TarError, OSError) as e:
            logger.log_toolchain_operation(
                "unpack", self.binary_path, False, archive=self.archive_path,
                error_message=str(e)
            )
            raise ToolchainUnavailableError(
                f"Failed to unpack optimizer archive: {self.archive_path}",
                archive=self.archive_path,
                original_error=str(e)
            ) from e

        if not self.is_ready():
            raise ToolchainUnavailableError(
                f"Optimizer archive does not contain {self.binary_path}",
                archive=self.archive_path
            )

        logger.log_toolchain_operation("unpack", self.binary_path, True, archive=self.archive_path)
        return True

    def _stripped_members(self, archive: tarfile.TarFile) -> List[tarfile.TarInfo]:
        """Drop leading path components, like tar --strip-components"""
        members = []
        for member in archive.getmembers():
            parts = member.name.split('/')
            if len(parts) <= self.strip_components:
                continue
            member.name = '/'.join(parts[self.strip_components:])
            members.append(member)
        return members

    def command(self, local_path: str) -> List[str]:
        return [
            self.binary_path,
            OptimizerConstants.OVERWRITE_FLAG,
            OptimizerConstants.STRIP_ALL_FLAG,
            f"{OptimizerConstants.MAX_QUALITY_FLAG}{self.quality}",
            local_path
        ]

    def run(self, local_path: str) -> None:
        """
        Recompress local_path in place

        Raises:
            OptimizationFailedError: On non-zero exit or launch failure
        """
        try:
            completed = subprocess.run(
                self.command(local_path),
                capture_output=True,
                text=True
            )
        except OSError as e:
            logger.log_toolchain_operation(
                "optimize", self.binary_path, False, path=local_path, error_message=str(e)
            )
            raise OptimizationFailedError(
                f"Failed to launch optimizer: {e}",
                path=local_path
            ) from e

        if completed.returncode != 0:
            logger.log_toolchain_operation(
                "optimize", self.binary_path, False,
                path=local_path, returncode=completed.returncode
            )
            raise OptimizationFailedError(
                f"Optimizer exited with status {completed.returncode}",
                path=local_path,
                returncode=completed.returncode,
                stderr=(completed.stderr or '').strip()
            )

        logger.log_toolchain_operation("optimize", self.binary_path, True, path=local_path)
