"""
Shared fixtures: label images, a fake print driver and an in-memory queue.
"""

import io
import os
import subprocess
import threading

import pytest
from PIL import Image

from label_print_service.app import create_app
from label_print_service.catalog import FormatCatalog
from label_print_service.errors import RemoteStorageError
from label_print_service.storage import QueueStore


QL_500 = ['-m', 'QL-500', '-p', 'usb://0x04f9:0x2015']
QL_1050 = ['-m', 'QL-1050', '-p', 'usb://0x04f9:0x2020']


def png_bytes(width, height, image_format='PNG'):
    """Encoded image of an exact pixel size."""
    buffer = io.BytesIO()
    mode = 'RGB' if image_format == 'JPEG' else '1'
    Image.new(mode, (width, height), 1 if mode == '1' else (255, 255, 255)).save(buffer, format=image_format)
    return buffer.getvalue()


class FakeDriver:
    """
    Stand-in for subprocess.run.

    Records every command. Behaviour comes from ``responder(command)``
    when set, else from ``returncode``/``output``/``exc``.
    """

    def __init__(self):
        self.calls = []
        self.returncode = 0
        self.output = b'Total: 1 page(s)\n'
        self.exc = None
        self.responder = None
        self._lock = threading.Lock()

    def __call__(self, command, stdout=None, stderr=None, timeout=None, check=False):
        with self._lock:
            self.calls.append({'command': list(command), 'stdout': stdout,
                               'stderr': stderr, 'timeout': timeout})
        if self.responder is not None:
            return self.responder(command)
        if self.exc is not None:
            raise self.exc
        return subprocess.CompletedProcess(command, self.returncode, stdout=self.output)

    @property
    def commands(self):
        return [call['command'] for call in self.calls]

    def print_commands(self):
        return [c for c in self.commands if 'print' in c]


class MemoryQueueStore(QueueStore):
    """Queue kept in a dict, with switchable faults."""

    def __init__(self, items=None):
        self.items = dict(items or {})
        self.fail_list = False
        self.fail_download = set()
        self.fail_delete = set()
        self.deleted = []

    def list_keys(self):
        if self.fail_list:
            raise RemoteStorageError('listing unavailable')
        return list(self.items)

    def download(self, key, dest):
        if key in self.fail_download or key not in self.items:
            raise RemoteStorageError(f'cannot download {key}')
        with open(dest, 'wb') as f:
            f.write(self.items[key])

    def delete(self, key):
        if key in self.fail_delete:
            raise RemoteStorageError(f'cannot delete {key}')
        del self.items[key]
        self.deleted.append(key)


# Fixtures

@pytest.fixture
def driver(monkeypatch):
    """Fake print driver patched over subprocess.run."""
    fake = FakeDriver()
    monkeypatch.setattr(subprocess, 'run', fake)
    return fake


@pytest.fixture
def make_png(tmp_path):
    """Write a PNG of the given size and return its path."""
    def _make(width, height, name='label.png', image_format='PNG'):
        path = tmp_path / name
        path.write_bytes(png_bytes(width, height, image_format))
        return str(path)
    return _make


@pytest.fixture
def catalog():
    return FormatCatalog.from_config()


@pytest.fixture
def queue_store():
    return MemoryQueueStore()


@pytest.fixture
def upload_dir(tmp_path):
    return str(tmp_path / 'uploads')


@pytest.fixture
def queue_dir(tmp_path):
    return str(tmp_path / 'queue')


@pytest.fixture
def app_settings(upload_dir, queue_dir):
    return {
        'TESTING': True,
        'API_KEY': None,
        'UPLOAD_DIR': upload_dir,
        'QUEUE_WORK_DIR': queue_dir,
        'MAX_UPLOAD_BYTES': 1024 * 1024,
        'UPLOAD_CLEANUP_ON_FAILURE': False,
        'ACCEPTED_IMAGE_FORMATS': ('PNG',),
        'DRIVER': 'brother_ql',
        'DRIVER_BACKEND': 'pyusb',
        'DRIVER_TIMEOUT': 60,
        'KEY_SEPARATOR': '-',
        'LABEL_CATALOG_FILE': None,
        'QUEUE_BUCKET': None,
    }


@pytest.fixture
def app(app_settings, queue_store, driver):
    return create_app(app_settings, queue_store=queue_store)


@pytest.fixture
def client(app):
    return app.test_client()


def listdir(path):
    """Directory contents, empty if it does not exist."""
    return sorted(os.listdir(path)) if os.path.isdir(path) else []
