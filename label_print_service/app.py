"""
Label Print Service - Main Application
======================================

HTTP surface of the service: label uploads, the queue-drain webhook,
printer status and health.

Run: python -m label_print_service
"""

import signal
import threading
from typing import Any, Dict, Optional

from flask import Blueprint, Flask, Response, current_app, g, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import RequestEntityTooLarge
from werkzeug.serving import make_server

from . import __version__
from . import config
from .catalog import FormatCatalog
from .errors import LabelPrintError, MissingFieldError, UnauthorizedError, UnknownLabelError
from .executor import PrintExecutor
from .intake import QueueDrain, UploadIntake
from .intake.upload import FIELD_NAME
from .logging_config import get_logger, setup_logging
from .models import RequestContext
from .probe import PrinterStatusProbe
from .storage import GCSParameterStore, GCSQueueStore, QueueStore, publish_endpoint

logger = get_logger(__name__)

bp = Blueprint('labels', __name__)

EXTENSION = 'label_print'


# =============================================================================
# Application Setup
# =============================================================================

def _default_settings() -> Dict[str, Any]:
    """Configuration values copied from the config module."""
    return {
        'API_KEY': config.API_KEY,
        'MAX_UPLOAD_BYTES': config.MAX_UPLOAD_BYTES,
        'ACCEPTED_IMAGE_FORMATS': config.ACCEPTED_IMAGE_FORMATS,
        'UPLOAD_CLEANUP_ON_FAILURE': config.UPLOAD_CLEANUP_ON_FAILURE,
        'UPLOAD_DIR': config.UPLOAD_DIR,
        'QUEUE_WORK_DIR': config.QUEUE_WORK_DIR,
        'QUEUE_BUCKET': config.QUEUE_BUCKET,
        'QUEUE_PREFIX': config.QUEUE_PREFIX,
        'KEY_SEPARATOR': config.KEY_SEPARATOR,
        'DRIVER': config.DRIVER,
        'DRIVER_BACKEND': config.DRIVER_BACKEND,
        'DRIVER_TIMEOUT': config.DRIVER_TIMEOUT,
        'PROBE_TIMEOUT': config.PROBE_TIMEOUT,
        'LABEL_CATALOG_FILE': config.LABEL_CATALOG_FILE,
    }


def create_app(overrides: Optional[Dict[str, Any]] = None, *,
               catalog: Optional[FormatCatalog] = None,
               executor: Optional[PrintExecutor] = None,
               probe: Optional[PrinterStatusProbe] = None,
               queue_store: Optional[QueueStore] = None) -> Flask:
    """
    Build the Flask application.

    Args:
        overrides: Values replacing the defaults from the config module
        catalog, executor, probe, queue_store: Pre-built collaborators;
            built from configuration when omitted. Without a queue store
            and without QUEUE_BUCKET the drain endpoint answers 503.
    """
    app = Flask(__name__)
    app.config.from_mapping(_default_settings())
    if overrides:
        app.config.update(overrides)
    app.config['MAX_CONTENT_LENGTH'] = app.config['MAX_UPLOAD_BYTES']
    CORS(app)

    if catalog is None:
        catalog = FormatCatalog.from_config(app.config['LABEL_CATALOG_FILE'])
    if executor is None:
        executor = PrintExecutor(
            driver=app.config['DRIVER'],
            backend=app.config['DRIVER_BACKEND'],
            timeout=app.config['DRIVER_TIMEOUT'],
        )
    if probe is None:
        probe = PrinterStatusProbe(
            driver=app.config['DRIVER'],
            backend=app.config['DRIVER_BACKEND'],
            timeout=app.config['PROBE_TIMEOUT'],
        )

    if queue_store is None and app.config['QUEUE_BUCKET']:
        queue_store = GCSQueueStore(app.config['QUEUE_BUCKET'], app.config['QUEUE_PREFIX'])

    drain = None
    if queue_store is not None:
        drain = QueueDrain(queue_store, catalog, executor, app.config['QUEUE_WORK_DIR'],
                           separator=app.config['KEY_SEPARATOR'])

    app.extensions[EXTENSION] = {
        'catalog': catalog,
        'executor': executor,
        'probe': probe,
        'drain': drain,
        'upload': UploadIntake(
            catalog,
            executor,
            app.config['UPLOAD_DIR'],
            accepted_formats=app.config['ACCEPTED_IMAGE_FORMATS'],
            cleanup_on_failure=app.config['UPLOAD_CLEANUP_ON_FAILURE'],
        ),
    }

    app.register_blueprint(bp)
    return app


def _service(name: str):
    return current_app.extensions[EXTENSION][name]


def _check_api_key():
    """Raise UnauthorizedError unless the request carries the API key."""
    api_key = current_app.config.get('API_KEY')
    if not api_key:
        return

    auth_header = request.headers.get('Authorization', '')
    if auth_header.startswith('Bearer ') and auth_header[7:] == api_key:
        return

    raise UnauthorizedError('Invalid API key')


def _text(body: str, status: int = 200) -> Response:
    return Response(body, status=status, mimetype='text/plain')


# =============================================================================
# Request Context & Errors
# =============================================================================

@bp.before_app_request
def _open_context():
    g.ctx = RequestContext(user=request.headers.get('X-User', 'unknown'))


@bp.after_app_request
def _log_request(response):
    ctx = g.get('ctx')
    if ctx is not None:
        logger.info('[%s] %s %s -> %s in %.3fs', ctx.request_id, request.method, request.path,
                    response.status_code, ctx.elapsed())
    return response


@bp.app_errorhandler(LabelPrintError)
def _label_print_error(error: LabelPrintError):
    if error.status_code >= 500:
        logger.error('%s %s failed: %s', request.method, request.path, error)
    else:
        logger.info('%s %s rejected: %s', request.method, request.path, error.message)
    return _text(f'error: {error.message}\n', error.status_code)


@bp.app_errorhandler(RequestEntityTooLarge)
def _too_large(error):
    limit = current_app.config['MAX_CONTENT_LENGTH']
    logger.info('%s %s rejected: body exceeds %s bytes', request.method, request.path, limit)
    return _text(f'error: request body exceeds {limit} bytes\n', 413)


# =============================================================================
# Health & Info Endpoints
# =============================================================================

@bp.route('/health', methods=['GET'])
def health():
    """Fixed acknowledgement."""
    return _text('OK\n')


@bp.route('/ping', methods=['GET'])
def ping():
    return _text('pong\n')


@bp.route('/api', methods=['GET'])
def api_info():
    """API info (JSON)."""
    return jsonify({
        'service': 'Label Print Service',
        'version': __version__,
        'status': 'running',
        'queue_configured': _service('drain') is not None,
        'endpoints': {
            'print': 'POST /print',
            'status': 'GET /status?label=<name>',
            'drain': 'POST /drain',
            'formats': 'GET /api/formats',
            'health': 'GET /health',
        }
    })


@bp.route('/api/formats', methods=['GET'])
def list_formats():
    """Known label formats with their dimensions and printers."""
    catalog = _service('catalog')
    return jsonify({
        'formats': catalog.to_dict(),
        'count': len(catalog),
    })


# =============================================================================
# Printing
# =============================================================================

@bp.route('/print', methods=['POST'])
def print_upload():
    """Print an uploaded PNG; the label format comes from its pixel size."""
    _check_api_key()

    result = _service('upload').handle(request.files.get(FIELD_NAME), g.ctx)
    job = result.job
    return _text(f'Printed {job.original_name} as {job.label} on {job.target.model}\n')


@bp.route('/drain', methods=['POST'])
def drain_queue():
    """Webhook: print everything waiting in the remote queue."""
    _check_api_key()

    drain = _service('drain')
    if drain is None:
        return _text('error: queue is not configured\n', 503)

    drain.drain(g.ctx)
    return _text('')


# =============================================================================
# Printer Status
# =============================================================================

@bp.route('/status', methods=['GET'])
def printer_status():
    """Is the printer for a label currently connected?"""
    label = request.args.get('label', '').strip()
    try:
        if not label:
            raise MissingFieldError('label')

        target = _service('catalog').target_for(label)
        if target is None:
            raise UnknownLabelError(label)

        active = _service('probe').is_active(target.port)
    except LabelPrintError as e:
        return jsonify({'error': e.message}), e.status_code

    return jsonify({
        'model': target.model,
        'active': active,
        'label': label,
    })


# =============================================================================
# Main
# =============================================================================

def main():
    """Run the service until SIGINT/SIGTERM."""
    setup_logging(config.LOG_LEVEL, config.LOG_DIR)

    app = create_app()
    services = app.extensions[EXTENSION]

    if config.PUBLIC_URL and config.PARAMETER_BUCKET and config.ENDPOINT_PARAMETER:
        publish_endpoint(GCSParameterStore(config.PARAMETER_BUCKET),
                         config.ENDPOINT_PARAMETER, config.PUBLIC_URL)

    server = make_server(config.HOST, config.PORT, app, threaded=True)
    stopping = threading.Event()

    def _shutdown(signum, frame):
        if stopping.is_set():
            return
        stopping.set()
        logger.info('Received signal %s, shutting down', signum)
        # shutdown() blocks until serve_forever returns, so not from this thread
        threading.Thread(target=server.shutdown, name='shutdown', daemon=True).start()

    signal.signal(signal.SIGINT, _shutdown)
    signal.signal(signal.SIGTERM, _shutdown)

    logger.info('Label Print Service %s on http://%s:%s', __version__, config.HOST, config.PORT)
    logger.info('Catalog: %d label format(s); queue: %s', len(services['catalog']),
                config.QUEUE_BUCKET or 'not configured')
    if config.PUBLIC_URL:
        logger.info('Public endpoint: %s', config.PUBLIC_URL)

    try:
        server.serve_forever()
    finally:
        if services['drain'] is not None:
            services['drain'].stop()
        if not services['executor'].wait_idle(config.SHUTDOWN_GRACE):
            logger.warning('Shutting down with %d print(s) still running',
                           services['executor'].in_flight)
        server.server_close()
        logger.info('Service has shut down')


if __name__ == '__main__':
    main()
