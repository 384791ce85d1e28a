"""
Tests for the cloud storage queue and parameter store wrappers.
"""

from unittest.mock import MagicMock

import pytest
from google.api_core import exceptions as gcloud_exceptions

from label_print_service.errors import RemoteStorageError
from label_print_service.storage import GCSParameterStore, GCSQueueStore, publish_endpoint


def blob(name):
    b = MagicMock()
    b.name = name
    return b


@pytest.fixture
def gcs():
    return MagicMock()


def test_list_keys_skips_folders(gcs):
    gcs.list_blobs.return_value = iter([blob('pending/'), blob('pending/62-a.png'), blob('102x152-b.png')])

    store = GCSQueueStore('labels', prefix='pending/', client=gcs)

    assert store.list_keys() == ['pending/62-a.png', '102x152-b.png']
    gcs.list_blobs.assert_called_once_with('labels', prefix='pending/')


def test_list_without_prefix(gcs):
    gcs.list_blobs.return_value = iter([])

    GCSQueueStore('labels', client=gcs).list_keys()

    gcs.list_blobs.assert_called_once_with('labels', prefix=None)


def test_list_failure(gcs):
    gcs.list_blobs.side_effect = gcloud_exceptions.Forbidden('no access')

    with pytest.raises(RemoteStorageError):
        GCSQueueStore('labels', client=gcs).list_keys()


def test_download_and_delete(gcs):
    store = GCSQueueStore('labels', client=gcs)
    bucket = gcs.bucket.return_value

    store.download('62-a.png', '/tmp/62-a.png')
    store.delete('62-a.png')

    gcs.bucket.assert_called_once_with('labels')
    bucket.blob.assert_called_with('62-a.png')
    bucket.blob.return_value.download_to_filename.assert_called_once_with('/tmp/62-a.png')
    bucket.blob.return_value.delete.assert_called_once_with()


def test_download_failure(gcs):
    gcs.bucket.return_value.blob.return_value.download_to_filename.side_effect = \
        gcloud_exceptions.NotFound('gone')

    with pytest.raises(RemoteStorageError, match='62-a.png'):
        GCSQueueStore('labels', client=gcs).download('62-a.png', '/tmp/x')


def test_local_write_failure_during_download(gcs):
    gcs.bucket.return_value.blob.return_value.download_to_filename.side_effect = \
        PermissionError(13, 'Permission denied')

    with pytest.raises(RemoteStorageError):
        GCSQueueStore('labels', client=gcs).download('62-a.png', '/tmp/x')


def test_delete_failure(gcs):
    gcs.bucket.return_value.blob.return_value.delete.side_effect = \
        gcloud_exceptions.ServiceUnavailable('try later')

    with pytest.raises(RemoteStorageError):
        GCSQueueStore('labels', client=gcs).delete('62-a.png')


def test_publish_endpoint(gcs):
    store = GCSParameterStore('config', client=gcs)

    assert publish_endpoint(store, 'label-printer/endpoint', 'https://abc.example.com') is True

    gcs.bucket.return_value.blob.assert_called_once_with('label-printer/endpoint')
    gcs.bucket.return_value.blob.return_value.upload_from_string.assert_called_once_with(
        'https://abc.example.com', content_type='text/plain')


def test_publish_endpoint_failure_is_not_fatal(gcs):
    gcs.bucket.return_value.blob.return_value.upload_from_string.side_effect = \
        gcloud_exceptions.Forbidden('no access')

    store = GCSParameterStore('config', client=gcs)

    assert publish_endpoint(store, 'label-printer/endpoint', 'https://abc.example.com') is False
