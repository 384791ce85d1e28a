"""
Remote storage: the queue bucket and the parameter store.
"""

from .queue_store import QueueStore, GCSQueueStore
from .parameter_store import ParameterStore, GCSParameterStore, publish_endpoint

__all__ = ['QueueStore', 'GCSQueueStore', 'ParameterStore', 'GCSParameterStore', 'publish_endpoint']
