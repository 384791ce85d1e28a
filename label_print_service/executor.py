"""
Print Executor
==============

Runs the external print driver (brother_ql CLI) for one job:

    brother_ql -b <backend> -m <model> -p <port> print -l <label> <file>

stdout and stderr are captured as one stream. The exit status is the
only success signal; the output is kept for diagnostics. The executor
never retries and never deletes files.
"""

import subprocess
import threading
import time
from typing import List, Optional

from . import config
from .errors import DriverFailedError, DriverSpawnError, DriverTimeoutError, EmptyTargetError
from .locks import DeviceLocks
from .logging_config import get_job_logger
from .models import PrintJob, PrintResult


class PrintExecutor:
    """Invokes the print driver, one job at a time per printer."""

    def __init__(self, driver: str = config.DRIVER, backend: str = config.DRIVER_BACKEND,
                 timeout: Optional[float] = config.DRIVER_TIMEOUT,
                 locks: Optional[DeviceLocks] = None):
        self.driver = driver
        self.backend = backend
        self.timeout = timeout
        self.locks = locks if locks is not None else DeviceLocks()

        self._in_flight = 0
        self._idle = threading.Condition()

    def build_command(self, job: PrintJob) -> List[str]:
        """Driver argv for a job."""
        return [
            self.driver,
            '-b', self.backend,
            '-m', job.target.model,
            '-p', job.target.port,
            'print',
            '-l', job.label,
            job.path,
        ]

    def execute(self, job: PrintJob) -> PrintResult:
        """
        Print a job synchronously.

        Returns:
            PrintResult with the driver's combined output

        Raises:
            EmptyTargetError: Job has no printer target
            DriverSpawnError: Driver could not be started
            DriverTimeoutError: Driver exceeded the timeout
            DriverFailedError: Driver exited nonzero
        """
        if job.target.is_empty:
            raise EmptyTargetError(f"Job {job.id} has no printer target for label '{job.label}'")

        job_logger = get_job_logger(job.id)
        command = self.build_command(job)

        self._enter()
        try:
            with self.locks.get(job.target.key):
                job_logger.info('Printing %s as %s on %s', job.original_name or job.path,
                                job.label, job.target)
                started = time.monotonic()
                try:
                    completed = subprocess.run(
                        command,
                        stdout=subprocess.PIPE,
                        stderr=subprocess.STDOUT,
                        timeout=self.timeout,
                        check=False,
                    )
                except subprocess.TimeoutExpired as e:
                    job_logger.error('Driver timed out after %ss', self.timeout)
                    raise DriverTimeoutError(
                        f'Print driver timed out after {self.timeout}s', self.timeout, e.output or b''
                    ) from e
                except OSError as e:
                    job_logger.error('Cannot start driver %s: %s', self.driver, e)
                    raise DriverSpawnError(f'Cannot start print driver {self.driver}: {e}') from e
                duration = time.monotonic() - started
        finally:
            self._leave()

        output = completed.stdout or b''
        if completed.returncode != 0:
            job_logger.error('Driver exited with status %s: %s', completed.returncode,
                             output.decode('utf-8', errors='replace').strip())
            raise DriverFailedError(
                f'Print driver exited with status {completed.returncode}',
                completed.returncode,
                output,
            )

        job_logger.info('Printed in %.2fs', duration)
        job_logger.debug('Driver output: %s', output.decode('utf-8', errors='replace').strip())
        return PrintResult(job=job, output=output, returncode=completed.returncode, duration=duration)

    # =========================================================================
    # Shutdown support
    # =========================================================================

    @property
    def in_flight(self) -> int:
        with self._idle:
            return self._in_flight

    def wait_idle(self, timeout: Optional[float] = None) -> bool:
        """Block until no job is printing; False if the timeout expired first."""
        with self._idle:
            return self._idle.wait_for(lambda: self._in_flight == 0, timeout)

    def _enter(self):
        with self._idle:
            self._in_flight += 1

    def _leave(self):
        with self._idle:
            self._in_flight -= 1
            if self._in_flight == 0:
                self._idle.notify_all()
