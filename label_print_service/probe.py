"""
Printer Status Probe
====================

Heuristic liveness check: runs the driver's ``discover`` sub-command and
looks for the printer's port string in the output. Not a structured
parse, so unrelated output containing the same text reads as active.
"""

import subprocess
from typing import Optional

from . import config
from .errors import ProbeError
from .logging_config import get_logger

logger = get_logger(__name__)


class PrinterStatusProbe:
    """Read-only printer discovery."""

    def __init__(self, driver: str = config.DRIVER, backend: str = config.DRIVER_BACKEND,
                 timeout: Optional[float] = config.PROBE_TIMEOUT):
        self.driver = driver
        self.backend = backend
        self.timeout = timeout

    def discover(self) -> str:
        """Combined output of ``<driver> -b <backend> discover``."""
        command = [self.driver, '-b', self.backend, 'discover']
        try:
            completed = subprocess.run(
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                timeout=self.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            raise ProbeError(f'Printer discovery timed out after {self.timeout}s') from e
        except OSError as e:
            raise ProbeError(f'Cannot start print driver {self.driver}: {e}') from e

        output = (completed.stdout or b'').decode('utf-8', errors='replace')
        if completed.returncode != 0:
            raise ProbeError(
                f'Printer discovery exited with status {completed.returncode}',
                {'output': output.strip()},
            )
        return output

    def is_active(self, port: str) -> bool:
        """True when ``port`` appears in the discovery output."""
        if not port:
            return False
        active = port in self.discover()
        logger.debug('Printer %s active: %s', port, active)
        return active
