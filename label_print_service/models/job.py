"""
Print Job Model
===============

Transient values passed through one print: the job itself, the result
of a successful execution, the per-request context and the summary of
a queue drain. Nothing here is persisted.
"""

import time
import uuid
from dataclasses import dataclass, field, asdict
from typing import Optional, Dict, Any, List

from .printer import PrinterTarget


def new_job_id() -> str:
    return f"JOB-{str(uuid.uuid4())[:8].upper()}"


@dataclass(frozen=True)
class RequestContext:
    """Values scoped to a single inbound request."""

    request_id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    user: str = "unknown"
    started_at: float = field(default_factory=time.monotonic)

    def elapsed(self) -> float:
        """Seconds since the request started."""
        return time.monotonic() - self.started_at


@dataclass(frozen=True)
class PrintJob:
    """One label to print; consumed once by the executor."""

    target: PrinterTarget
    label: str
    path: str

    source: str = "upload"  # upload, queue
    original_name: str = ""
    id: str = field(default_factory=new_job_id)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['target'] = self.target.to_dict()
        return data


@dataclass
class PrintResult:
    """Outcome of a driver invocation that exited successfully."""

    job: PrintJob
    output: bytes = b""
    returncode: int = 0
    duration: float = 0.0

    @property
    def output_text(self) -> str:
        return self.output.decode('utf-8', errors='replace')


@dataclass
class DrainItem:
    """What happened to one queue item during a drain."""

    key: str
    status: str = "pending"  # pending, printed, failed, skipped
    label: str = ""
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class DrainReport:
    """Summary of one pass over the remote queue."""

    items: List[DrainItem] = field(default_factory=list)
    stopped: bool = False

    def count(self, status: str) -> int:
        return sum(1 for item in self.items if item.status == status)

    @property
    def printed(self) -> int:
        return self.count('printed')

    @property
    def failed(self) -> int:
        return self.count('failed')

    @property
    def skipped(self) -> int:
        return self.count('skipped')

    def to_dict(self) -> Dict[str, Any]:
        return {
            'items': [item.to_dict() for item in self.items],
            'printed': self.printed,
            'failed': self.failed,
            'skipped': self.skipped,
            'stopped': self.stopped,
        }
