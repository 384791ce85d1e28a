"""
Label Print Service Configuration
"""

import os

from dotenv import load_dotenv

# Pick up a local .env before any value below is read
load_dotenv()


def _env_bool(name: str, default: str = 'false') -> bool:
    return os.environ.get(name, default).lower() in ('1', 'true', 'yes')


def _env_list(name: str, default: str) -> tuple:
    raw = os.environ.get(name, default)
    return tuple(item.strip().upper() for item in raw.split(',') if item.strip())


# =============================================================================
# Server Configuration
# =============================================================================

PORT = int(os.environ.get('LABEL_PRINT_PORT', 8080))
HOST = os.environ.get('LABEL_PRINT_HOST', '127.0.0.1')
DEBUG = _env_bool('LABEL_PRINT_DEBUG')

# Optional bearer token for the POST endpoints (disabled when unset)
API_KEY = os.environ.get('LABEL_PRINT_API_KEY') or None

# Seconds to wait for in-flight prints on shutdown
SHUTDOWN_GRACE = float(os.environ.get('LABEL_PRINT_SHUTDOWN_GRACE', 30))

# =============================================================================
# Upload Intake
# =============================================================================

MAX_UPLOAD_BYTES = int(os.environ.get('LABEL_PRINT_MAX_UPLOAD_BYTES', 10 * 1024 * 1024))

# Only these Pillow format names are accepted for uploads
ACCEPTED_IMAGE_FORMATS = _env_list('LABEL_PRINT_IMAGE_FORMATS', 'PNG')

# Delete the uploaded file even when the job fails
UPLOAD_CLEANUP_ON_FAILURE = _env_bool('LABEL_PRINT_CLEANUP_ON_FAILURE')

# =============================================================================
# Print Driver (brother_ql CLI)
# =============================================================================

DRIVER = os.environ.get('LABEL_PRINT_DRIVER', 'brother_ql')
DRIVER_BACKEND = os.environ.get('LABEL_PRINT_BACKEND', 'pyusb')
DRIVER_TIMEOUT = float(os.environ.get('LABEL_PRINT_DRIVER_TIMEOUT', 120))  # seconds
PROBE_TIMEOUT = float(os.environ.get('LABEL_PRINT_PROBE_TIMEOUT', 30))  # seconds, discover only

# =============================================================================
# Label Catalog
# =============================================================================

QL_500 = {'model': 'QL-500', 'port': 'usb://0x04f9:0x2015'}
QL_1050 = {'model': 'QL-1050', 'port': 'usb://0x04f9:0x2020'}

# Printable dot size (width, height) -> label format
LABEL_DIMENSIONS = {
    (696, 1109): '62x100',
    (696, 271): '62x29',
    (306, 991): '29x90',
    (413, 991): '38x90',
    (165, 566): '17x54',
    (1164, 1660): '102x152',
    (1164, 526): '102x51',
}

# Label format -> printer target
LABEL_TARGETS = {
    '62': QL_500,  # endless roll, no fixed height
    '62x100': QL_500,
    '62x29': QL_500,
    '29x90': QL_500,
    '38x90': QL_500,
    '17x54': QL_500,
    '102x152': QL_1050,
    '102x51': QL_1050,
}

LABEL_DESCRIPTIONS = {
    '62': '62mm endless',
    '62x100': '62mm x 100mm die-cut',
    '62x29': '62mm x 29mm die-cut',
    '29x90': '29mm x 90mm die-cut',
    '38x90': '38mm x 90mm die-cut',
    '17x54': '17mm x 54mm die-cut',
    '102x152': '102mm x 152mm die-cut',
    '102x51': '102mm x 51mm die-cut',
}

# JSON file replacing the tables above
LABEL_CATALOG_FILE = os.environ.get('LABEL_PRINT_CATALOG_FILE') or None

# =============================================================================
# Storage Configuration
# =============================================================================

DATA_DIR = os.environ.get('LABEL_PRINT_DATA_DIR', os.path.expanduser('~/.label_print_service'))
UPLOAD_DIR = os.environ.get('LABEL_PRINT_UPLOAD_DIR', os.path.join(DATA_DIR, 'uploads'))
QUEUE_WORK_DIR = os.environ.get('LABEL_PRINT_QUEUE_DIR', os.path.join(DATA_DIR, 'queue'))

# Remote queue (cloud storage bucket)
QUEUE_BUCKET = os.environ.get('LABEL_PRINT_QUEUE_BUCKET') or None
QUEUE_PREFIX = os.environ.get('LABEL_PRINT_QUEUE_PREFIX', '')
KEY_SEPARATOR = os.environ.get('LABEL_PRINT_KEY_SEPARATOR', '-')

# Public endpoint discovery
PUBLIC_URL = os.environ.get('LABEL_PRINT_PUBLIC_URL') or None
PARAMETER_BUCKET = os.environ.get('LABEL_PRINT_PARAMETER_BUCKET') or None
ENDPOINT_PARAMETER = os.environ.get('LABEL_PRINT_ENDPOINT_PARAMETER') or None

# =============================================================================
# Logging
# =============================================================================

LOG_LEVEL = os.environ.get('LABEL_PRINT_LOG_LEVEL', 'INFO').upper()
LOG_DIR = os.environ.get('LABEL_PRINT_LOG_DIR') or None
