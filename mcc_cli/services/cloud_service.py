"""Sharing containers through a storage bucket.

Transfers go through a ``TransferBackend``. The default backend shells out to
``gsutil`` so it picks up whatever credentials gcloud is logged in with.
"""

import logging
import os
import shutil
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from mcc_cli.core.config_paths import ConfigPaths
from mcc_cli.core.errors import TransferError

LOGGER = logging.getLogger(__name__)

GCS_SCHEME = "gs://"
DOWNLOAD_FILENAME = "downloaded-session.json.gz"


class TransferBackend(ABC):
    """Abstract base class for whole-file uploads and downloads."""

    @abstractmethod
    def put(self, local_path: Path, remote_uri: str) -> str:
        """Upload ``local_path`` to ``remote_uri``.

        Returns:
            The remote URI the file was written to

        Raises:
            TransferError: If the upload fails
        """

    @abstractmethod
    def get(self, remote_uri: str, local_path: Path) -> None:
        """Download ``remote_uri`` to ``local_path``.

        Raises:
            TransferError: If the download fails
        """


class GsutilTransfer(TransferBackend):
    """Transfer backend using the gsutil command line tool."""

    def __init__(self, gsutil_path: Optional[str] = None):
        """Initialize the backend.

        Args:
            gsutil_path: gsutil executable (default: $GSUTIL_PATH, then PATH)
        """
        self.gsutil_path = (
            gsutil_path or os.environ.get("GSUTIL_PATH") or shutil.which("gsutil") or "gsutil"
        )

    def _copy(self, source: str, destination: str) -> None:
        LOGGER.debug("Running %s cp %s %s", self.gsutil_path, source, destination)
        try:
            result = subprocess.run(
                [self.gsutil_path, "cp", source, destination],
                capture_output=True,
                text=True,
            )
        except (FileNotFoundError, PermissionError) as e:
            raise TransferError(
                f"Failed to run gsutil at: {self.gsutil_path} ({e}). "
                "Install the Google Cloud SDK or set GSUTIL_PATH."
            ) from e

        if result.returncode != 0:
            raise TransferError(f"gsutil cp failed: {result.stderr.strip()}")

    def put(self, local_path: Path, remote_uri: str) -> str:
        self._copy(str(local_path), remote_uri)
        return remote_uri

    def get(self, remote_uri: str, local_path: Path) -> None:
        self._copy(remote_uri, str(local_path))


def bucket_uri(bucket: str, filename: str) -> str:
    """Return ``gs://<bucket>/<filename>``, accepting buckets with or without the scheme."""
    bucket_name = bucket.strip()
    if bucket_name.startswith(GCS_SCHEME):
        bucket_name = bucket_name[len(GCS_SCHEME):]
    bucket_name = bucket_name.rstrip("/")
    return f"{GCS_SCHEME}{bucket_name}/{filename}"


def share_container(
    local_path: Path, bucket: str, backend: Optional[TransferBackend] = None
) -> str:
    """Upload a container to ``bucket``.

    Args:
        local_path: Container file to upload
        bucket: Bucket name or gs:// URI
        backend: Transfer backend (default: gsutil)

    Returns:
        URI of the uploaded container

    Raises:
        TransferError: If the file is missing or the upload fails
    """
    local_path = Path(local_path)
    if not local_path.is_file():
        raise TransferError(f"File not found: {local_path}")

    backend = backend or GsutilTransfer()
    remote_uri = bucket_uri(bucket, local_path.name)
    uploaded = backend.put(local_path, remote_uri)
    LOGGER.info("Uploaded %s to %s", local_path, uploaded)
    return uploaded


def fetch_container(
    remote_uri: str,
    backend: Optional[TransferBackend] = None,
    download_dir: Optional[Path] = None,
) -> Path:
    """Download a container into the scratch directory.

    Args:
        remote_uri: gs:// URI of the container
        backend: Transfer backend (default: gsutil)
        download_dir: Destination directory (default: ~/.mcc/temp)

    Returns:
        Local path of the downloaded container

    Raises:
        TransferError: If the download fails
    """
    if download_dir is None:
        download_dir = ConfigPaths.get_temp_dir()
    download_dir = Path(download_dir)
    download_dir.mkdir(parents=True, exist_ok=True)

    local_path = download_dir / DOWNLOAD_FILENAME
    backend = backend or GsutilTransfer()
    backend.get(remote_uri, local_path)
    LOGGER.info("Downloaded %s to %s", remote_uri, local_path)
    return local_path
