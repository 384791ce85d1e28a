"""
Parameter Store
===============

Holds the service's publicly reachable address so other systems can
find it. Written once at startup.
"""

from abc import ABC, abstractmethod
from typing import Optional

from google.api_core import exceptions as gcloud_exceptions
from google.cloud import storage

from ..errors import RemoteStorageError
from ..logging_config import get_logger

logger = get_logger(__name__)


class ParameterStore(ABC):

    @abstractmethod
    def put(self, name: str, value: str) -> None:
        """Store ``value`` under ``name``, replacing any previous value."""


class GCSParameterStore(ParameterStore):
    """Parameters kept as small text objects in a bucket."""

    def __init__(self, bucket_name: str, client: Optional[storage.Client] = None):
        self.bucket_name = bucket_name
        self._client = client or storage.Client()
        self._bucket = self._client.bucket(bucket_name)

    def put(self, name: str, value: str) -> None:
        try:
            self._bucket.blob(name).upload_from_string(value, content_type='text/plain')
        except gcloud_exceptions.GoogleAPICallError as e:
            raise RemoteStorageError(f'Cannot write parameter {name}: {e}') from e
        logger.info('Stored parameter gs://%s/%s', self.bucket_name, name)


def publish_endpoint(store: ParameterStore, name: str, url: str) -> bool:
    """
    Write the public endpoint address; logged and skipped on failure.

    Returns:
        True if the value was stored
    """
    try:
        store.put(name, url)
    except RemoteStorageError as e:
        logger.error('Failed to publish endpoint %s: %s', url, e)
        return False
    logger.info('Published endpoint %s as %s', url, name)
    return True
