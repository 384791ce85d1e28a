"""
Label Print Service Intake
==========================

The two ways a job enters the service: a direct upload and a drain of
the remote queue. Both end at the PrintExecutor.
"""

from .upload import UploadIntake
from .queue_drain import QueueDrain

__all__ = ['UploadIntake', 'QueueDrain']
