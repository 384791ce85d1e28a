"""
Label Print Service Client
==========================

Python SDK for talking to a running Label Print Service.

Usage:
    from label_print_service.client import PrintClient

    client = PrintClient('http://localhost:8080', api_key='your-key')

    # Print a label image (format comes from its pixel size)
    result = client.print_file('shipping-62x100.png')

    # Is the printer for a label connected?
    client.get_status('62x100')

    # Print everything waiting in the remote queue
    client.drain()
"""

import os
from typing import Dict, Any, Optional, Union

import requests


class PrintClient:
    """Client for the Label Print Service."""

    def __init__(self, base_url: str = 'http://localhost:8080', api_key: str = None,
                 timeout: float = 30, print_timeout: float = 180):
        """
        Initialize client.

        Args:
            base_url: Base URL of the print service
            api_key: API key for authentication
            timeout: Timeout for quick requests (seconds)
            print_timeout: Timeout for print and drain requests (seconds)
        """
        self.base_url = base_url.rstrip('/')
        self.api_key = api_key
        self.timeout = timeout
        self.print_timeout = print_timeout

    def _headers(self) -> Dict[str, str]:
        """Get request headers."""
        headers = {}
        if self.api_key:
            headers['Authorization'] = f'Bearer {self.api_key}'
        return headers

    def _request(self, method: str, endpoint: str, timeout: float = None,
                 **kwargs) -> Union[requests.Response, Dict[str, Any]]:
        """Make an API request; the error dict is returned in place of a response on failure."""
        url = f'{self.base_url}{endpoint}'
        try:
            return requests.request(method, url, headers=self._headers(),
                                    timeout=timeout or self.timeout, **kwargs)
        except requests.exceptions.Timeout:
            return {'success': False, 'error': 'Request timeout'}
        except requests.exceptions.ConnectionError:
            return {'success': False, 'error': f'Cannot connect to {self.base_url}'}
        except requests.exceptions.RequestException as e:
            return {'success': False, 'error': str(e)}

    @staticmethod
    def _text_result(response) -> Dict[str, Any]:
        """Result dict for the plain-text endpoints."""
        if isinstance(response, dict):
            return response
        text = response.text.strip()
        if response.ok:
            return {'success': True, 'message': text, 'status_code': response.status_code}
        if text.startswith('error: '):
            text = text[len('error: '):]
        return {'success': False, 'error': text, 'status_code': response.status_code}

    @staticmethod
    def _json_body(response) -> Optional[Dict[str, Any]]:
        """Decoded JSON object, or None when the body is not one (proxy pages, 5xx HTML)."""
        try:
            data = response.json()
        except ValueError:
            return None
        return data if isinstance(data, dict) else None

    @staticmethod
    def _non_json_error(response) -> Dict[str, Any]:
        return {'success': False, 'error': response.text.strip(), 'status_code': response.status_code}

    # =========================================================================
    # Health
    # =========================================================================

    def health(self) -> Dict[str, Any]:
        """Check service health."""
        return self._text_result(self._request('GET', '/health'))

    def is_online(self) -> bool:
        """Check if service is online."""
        result = self.health()
        return result.get('success', False) and result.get('message') == 'OK'

    def list_formats(self) -> Dict[str, Any]:
        """Label formats known to the service; empty when unreachable or not JSON."""
        response = self._request('GET', '/api/formats')
        if isinstance(response, dict):
            return {}
        data = self._json_body(response)
        if data is None:
            return {}
        return data.get('formats', {})

    # =========================================================================
    # Printing
    # =========================================================================

    def print_image(self, image_data: bytes, filename: str = 'label.png') -> Dict[str, Any]:
        """
        Upload and print a label image.

        Args:
            image_data: Raw PNG bytes sized exactly for one label format
            filename: Name reported in the service's logs and response
        """
        files = {'image': (filename, image_data, 'image/png')}
        return self._text_result(
            self._request('POST', '/print', timeout=self.print_timeout, files=files)
        )

    def print_file(self, file_path: str) -> Dict[str, Any]:
        """Print an image file."""
        with open(file_path, 'rb') as f:
            return self.print_image(f.read(), filename=os.path.basename(file_path))

    def drain(self) -> Dict[str, Any]:
        """Trigger a drain of the remote queue."""
        return self._text_result(self._request('POST', '/drain', timeout=self.print_timeout))

    # =========================================================================
    # Status
    # =========================================================================

    def get_status(self, label: str) -> Dict[str, Any]:
        """
        Printer status for a label format.

        Returns:
            Example: {'success': True, 'model': 'QL-500', 'active': True, 'label': '62x100'}
        """
        response = self._request('GET', '/status', params={'label': label})
        if isinstance(response, dict):
            return response
        data = self._json_body(response)
        if data is None:
            return self._non_json_error(response)
        data['success'] = response.ok
        return data

    def is_printer_active(self, label: str) -> bool:
        """True if the printer for ``label`` is connected."""
        result = self.get_status(label)
        return bool(result.get('success') and result.get('active'))
