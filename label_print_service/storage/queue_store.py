"""
Remote Queue Store
==================

Pending label images live as objects in a cloud storage bucket, named
``<label>-<anything>``. The drain lists, downloads and deletes them.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from google.api_core import exceptions as gcloud_exceptions
from google.cloud import storage

from ..errors import RemoteStorageError
from ..logging_config import get_logger

logger = get_logger(__name__)


class QueueStore(ABC):
    """List/get/delete access to pending queue items."""

    @abstractmethod
    def list_keys(self) -> List[str]:
        """Keys of all pending items, in listing order."""

    @abstractmethod
    def download(self, key: str, dest: str) -> None:
        """Copy an item to the local path ``dest``."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove an item from the store."""


class GCSQueueStore(QueueStore):
    """Queue items stored in a Google Cloud Storage bucket."""

    def __init__(self, bucket_name: str, prefix: str = '', client: Optional[storage.Client] = None):
        self.bucket_name = bucket_name
        self.prefix = prefix
        self._client = client or storage.Client()
        self._bucket = self._client.bucket(bucket_name)

    def list_keys(self) -> List[str]:
        try:
            blobs = self._client.list_blobs(self.bucket_name, prefix=self.prefix or None)
            # Skip "directory" placeholder objects
            return [blob.name for blob in blobs if not blob.name.endswith('/')]
        except gcloud_exceptions.GoogleAPICallError as e:
            raise RemoteStorageError(f'Cannot list gs://{self.bucket_name}/{self.prefix}: {e}') from e

    def download(self, key: str, dest: str) -> None:
        try:
            self._bucket.blob(key).download_to_filename(dest)
        except (gcloud_exceptions.GoogleAPICallError, OSError) as e:
            raise RemoteStorageError(f'Cannot download gs://{self.bucket_name}/{key}: {e}') from e
        logger.debug('Downloaded gs://%s/%s to %s', self.bucket_name, key, dest)

    def delete(self, key: str) -> None:
        try:
            self._bucket.blob(key).delete()
        except gcloud_exceptions.GoogleAPICallError as e:
            raise RemoteStorageError(f'Cannot delete gs://{self.bucket_name}/{key}: {e}') from e
        logger.debug('Deleted gs://%s/%s', self.bucket_name, key)
