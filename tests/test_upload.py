"""
End-to-end tests for POST /print.
"""

import io
import os

import pytest

from label_print_service.app import create_app
from label_print_service.intake import upload as upload_module

from conftest import QL_500, QL_1050, listdir, png_bytes


def post_image(client, data, filename='label.png', headers=None):
    return client.post(
        '/print',
        data={'image': (io.BytesIO(data), filename)},
        content_type='multipart/form-data',
        headers=headers or {},
    )


def test_62x100_prints_on_ql500_and_removes_the_file(client, driver, upload_dir):
    response = post_image(client, png_bytes(696, 1109), filename='shipping.png')

    assert response.status_code == 200
    assert response.mimetype == 'text/plain'
    assert response.get_data(as_text=True) == 'Printed shipping.png as 62x100 on QL-500\n'

    [command] = driver.commands
    path = command[-1]
    assert command[:-1] == ['brother_ql', '-b', 'pyusb'] + QL_500 + ['print', '-l', '62x100']
    assert os.path.dirname(path) == upload_dir
    assert path.endswith('-shipping.png')
    assert not os.path.exists(path)
    assert listdir(upload_dir) == []


def test_102x152_goes_to_the_wide_printer(client, driver):
    response = post_image(client, png_bytes(1164, 1660))

    assert response.status_code == 200
    assert driver.commands[0][3:7] == QL_1050


def test_unknown_size_is_rejected_without_printing(client, driver, upload_dir):
    response = post_image(client, png_bytes(500, 500))

    assert response.status_code == 400
    assert '500x500' in response.get_data(as_text=True)
    assert driver.calls == []
    # Reference behaviour: the upload stays on disk
    assert len(listdir(upload_dir)) == 1


def test_unknown_size_cleanup_when_enabled(app_settings, queue_store, driver, upload_dir):
    app_settings['UPLOAD_CLEANUP_ON_FAILURE'] = True
    client = create_app(app_settings, queue_store=queue_store).test_client()

    response = post_image(client, png_bytes(500, 500))

    assert response.status_code == 400
    assert listdir(upload_dir) == []


def test_driver_failure_keeps_the_file(client, driver, upload_dir):
    driver.returncode = 1
    driver.output = b'No such device'

    response = post_image(client, png_bytes(696, 1109))

    assert response.status_code == 500
    assert response.get_data(as_text=True).startswith('error: ')
    assert len(listdir(upload_dir)) == 1


def test_missing_driver_is_a_server_error(client, driver):
    driver.exc = FileNotFoundError(2, 'No such file or directory', 'brother_ql')

    response = post_image(client, png_bytes(696, 1109))

    assert response.status_code == 500


def test_oversized_body_is_rejected_before_persisting(app_settings, queue_store, driver, upload_dir):
    app_settings['MAX_UPLOAD_BYTES'] = 2048
    client = create_app(app_settings, queue_store=queue_store).test_client()

    response = post_image(client, b'\x89PNG' + b'\0' * 8192)

    assert response.status_code == 413
    assert 'exceeds 2048 bytes' in response.get_data(as_text=True)
    assert driver.calls == []
    assert listdir(upload_dir) == []


def test_missing_field(client, driver):
    response = client.post('/print', data={'other': 'x'}, content_type='multipart/form-data')

    assert response.status_code == 400
    assert "'image'" in response.get_data(as_text=True)


def test_empty_filename(client, driver):
    response = post_image(client, png_bytes(696, 1109), filename='')

    assert response.status_code == 400


def test_undecodable_upload(client, driver, upload_dir):
    response = post_image(client, b'not a png at all')

    assert response.status_code == 400
    assert driver.calls == []


def test_jpeg_is_rejected(client, driver):
    response = post_image(client, png_bytes(696, 1109, image_format='JPEG'), filename='label.jpg')

    assert response.status_code == 400
    assert driver.calls == []


def test_decompression_bomb_is_a_client_error(client, driver, monkeypatch):
    monkeypatch.setattr('PIL.Image.MAX_IMAGE_PIXELS', 1000)

    response = post_image(client, png_bytes(696, 1109))

    assert response.status_code == 400
    assert response.get_data(as_text=True).startswith('error: ')
    assert driver.calls == []


def test_same_filename_gets_separate_working_files(client, driver):
    post_image(client, png_bytes(696, 1109), filename='same.png')
    post_image(client, png_bytes(696, 1109), filename='same.png')

    first, second = (command[-1] for command in driver.commands)
    assert first != second


def test_unsafe_filename_stays_in_upload_dir(client, driver, upload_dir):
    driver.returncode = 1

    post_image(client, png_bytes(696, 1109), filename='../../etc/passwd.png')

    [stored] = listdir(upload_dir)
    assert '..' not in stored
    assert stored.endswith('etc_passwd.png')


def test_cleanup_failure_does_not_fail_the_print(client, driver, monkeypatch):
    def refuse(path):
        raise PermissionError(13, 'Permission denied', path)

    monkeypatch.setattr(upload_module.os, 'remove', refuse)

    response = post_image(client, png_bytes(696, 1109))

    assert response.status_code == 200


class TestApiKey:

    @pytest.fixture
    def client(self, app_settings, queue_store, driver):
        app_settings['API_KEY'] = 'secret'
        return create_app(app_settings, queue_store=queue_store).test_client()

    def test_missing_key(self, client, driver):
        response = post_image(client, png_bytes(696, 1109))

        assert response.status_code == 401
        assert driver.calls == []

    def test_wrong_key(self, client, driver):
        response = post_image(client, png_bytes(696, 1109), headers={'Authorization': 'Bearer nope'})

        assert response.status_code == 401

    def test_valid_key(self, client, driver):
        response = post_image(client, png_bytes(696, 1109), headers={'Authorization': 'Bearer secret'})

        assert response.status_code == 200
