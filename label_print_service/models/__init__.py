"""
Label Print Service Models
"""

from .printer import PrinterTarget
from .label import LabelDimensions, LabelFormat
from .job import PrintJob, PrintResult, RequestContext, DrainItem, DrainReport, new_job_id

__all__ = [
    'PrinterTarget',
    'LabelDimensions',
    'LabelFormat',
    'PrintJob',
    'PrintResult',
    'RequestContext',
    'DrainItem',
    'DrainReport',
    'new_job_id',
]
