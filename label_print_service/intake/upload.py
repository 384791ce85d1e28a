"""
Upload Intake
=============

One uploaded image, strictly in order:

    receive -> persist -> resolve format -> select target -> execute -> cleanup

The body size cap is enforced by Flask (MAX_CONTENT_LENGTH) before the
body is read. Files are persisted under a job-scoped name so concurrent
uploads of the same filename never share a path; the submitted name is
kept for logs only.

The local file is deleted after a successful print. On failure it stays
for inspection unless ``cleanup_on_failure`` is set.
"""

import os
from typing import Iterable, Optional

from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

from ..catalog import FormatCatalog
from ..errors import LocalStorageError, MissingFieldError, UnknownFormatError
from ..executor import PrintExecutor
from ..logging_config import get_logger
from ..models import PrintJob, PrintResult, RequestContext, new_job_id
from ..resolver import DEFAULT_ACCEPTED_FORMATS, resolve_format
from ..selector import select_target

logger = get_logger(__name__)

FIELD_NAME = 'image'


class UploadIntake:
    """Drives one upload from request to printed label."""

    def __init__(self, catalog: FormatCatalog, executor: PrintExecutor, upload_dir: str,
                 accepted_formats: Iterable[str] = DEFAULT_ACCEPTED_FORMATS,
                 cleanup_on_failure: bool = False):
        self.catalog = catalog
        self.executor = executor
        self.upload_dir = upload_dir
        self.accepted_formats = tuple(accepted_formats)
        self.cleanup_on_failure = cleanup_on_failure

    def handle(self, upload: Optional[FileStorage], ctx: RequestContext) -> PrintResult:
        """Print an uploaded label image; raises a LabelPrintError on any fault."""
        if upload is None or not upload.filename:
            raise MissingFieldError(FIELD_NAME)

        job_id = new_job_id()
        original_name = upload.filename
        path = self.persist(upload, job_id)
        logger.info('[%s] %s uploaded %s as %s', ctx.request_id, ctx.user, original_name, path)

        printed = False
        try:
            dimensions, label = resolve_format(path, self.catalog, self.accepted_formats)

            target = select_target(self.catalog, label)
            if target.is_empty:
                raise UnknownFormatError(f"No printer configured for label '{label}'")

            job = PrintJob(target=target, label=label.name, path=path, source='upload',
                           original_name=original_name, id=job_id)
            logger.info('[%s] %s is %s -> %s', ctx.request_id, dimensions, label, target)

            result = self.executor.execute(job)
            printed = True
            return result
        except Exception:
            logger.warning('[%s] Job %s for %s failed; file %s', ctx.request_id, job_id,
                           original_name, 'removed' if self.cleanup_on_failure else 'kept')
            raise
        finally:
            if printed or self.cleanup_on_failure:
                self.remove(path)

    def persist(self, upload: FileStorage, job_id: str) -> str:
        """Stream the upload to ``upload_dir`` and return the local path."""
        name = secure_filename(upload.filename) or 'upload'
        path = os.path.join(self.upload_dir, f'{job_id}-{name}')
        try:
            os.makedirs(self.upload_dir, exist_ok=True)
            upload.save(path)
        except OSError as e:
            raise LocalStorageError(f'Cannot store upload {upload.filename}: {e}') from e
        return path

    def remove(self, path: str) -> bool:
        """Delete a local artifact; a failure is logged, never raised."""
        try:
            os.remove(path)
        except FileNotFoundError:
            return True
        except OSError as e:
            logger.warning('Could not delete %s: %s', path, e)
            return False
        logger.debug('Deleted %s', path)
        return True
