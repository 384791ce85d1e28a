"""
Queue Drain
===========

Triggered by a webhook. Lists every pending object in the remote queue
and processes them one at a time in listing order:

    download -> format hint from key -> execute -> delete remote + local

A remote object and its local copy are removed only after a successful
print; on failure both stay so the next drain picks the item up again.
One item's failure never stops the rest of the drain. A listing failure
fails the whole drain.
"""

import os
import threading
from typing import Optional

from werkzeug.utils import secure_filename

from ..catalog import FormatCatalog
from ..errors import LabelPrintError
from ..executor import PrintExecutor
from ..logging_config import get_logger
from ..models import DrainItem, DrainReport, PrintJob, RequestContext
from ..selector import DEFAULT_SEPARATOR, select_target_for_key
from ..storage import QueueStore

logger = get_logger(__name__)


class QueueDrain:
    """Sequential drain of the remote queue."""

    def __init__(self, store: QueueStore, catalog: FormatCatalog, executor: PrintExecutor,
                 work_dir: str, separator: str = DEFAULT_SEPARATOR):
        self.store = store
        self.catalog = catalog
        self.executor = executor
        self.work_dir = work_dir
        self.separator = separator

        # Only one drain loop runs at a time
        self._running = threading.Lock()
        self._stop = threading.Event()

    def stop(self):
        """Make a running drain return after its current item."""
        self._stop.set()

    @property
    def stopped(self) -> bool:
        return self._stop.is_set()

    def drain(self, ctx: Optional[RequestContext] = None) -> DrainReport:
        """
        Process all pending items.

        Raises:
            RemoteStorageError: The queue could not be listed
        """
        ctx = ctx or RequestContext(user='drain')
        report = DrainReport()

        with self._running:
            if self._stop.is_set():
                report.stopped = True
                return report

            keys = self.store.list_keys()
            logger.info('[%s] Draining %d queued item(s)', ctx.request_id, len(keys))

            for key in keys:
                if self._stop.is_set():
                    logger.info('[%s] Drain stopped before %s', ctx.request_id, key)
                    report.stopped = True
                    break
                report.items.append(self._process(key, ctx))

        logger.info('[%s] Drain finished: %d printed, %d failed, %d skipped',
                    ctx.request_id, report.printed, report.failed, report.skipped)
        return report

    def local_path(self, key: str) -> str:
        """Working copy location for a queue key."""
        name = secure_filename(key.replace('/', '_')) or 'item'
        return os.path.join(self.work_dir, name)

    def _process(self, key: str, ctx: RequestContext) -> DrainItem:
        item = DrainItem(key=key)

        label, target = select_target_for_key(self.catalog, key, self.separator)
        item.label = label
        if target.is_empty:
            item.status = 'skipped'
            item.error = f"No printer configured for label '{label}'"
            logger.warning('[%s] Skipping %s: %s', ctx.request_id, key, item.error)
            return item

        path = self.local_path(key)
        try:
            os.makedirs(self.work_dir, exist_ok=True)
            self.store.download(key, path)

            job = PrintJob(target=target, label=label, path=path, source='queue', original_name=key)
            self.executor.execute(job)
        except (LabelPrintError, OSError) as e:
            item.status = 'failed'
            item.error = str(e)
            logger.error('[%s] Queue item %s failed: %s', ctx.request_id, key, e)
            return item

        item.status = 'printed'
        try:
            self.store.delete(key)
        except LabelPrintError as e:
            # Printed but still queued; the next drain will print it again
            item.error = str(e)
            logger.error('[%s] Printed %s but could not remove it from the queue: %s',
                         ctx.request_id, key, e)
            return item

        try:
            os.remove(path)
        except OSError as e:
            logger.warning('[%s] Could not delete %s: %s', ctx.request_id, path, e)
        return item
