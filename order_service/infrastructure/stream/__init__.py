"""Inbound order stream adapters."""

from .in_memory_stream import InMemoryOrderStream
from .kafka_stream import KafkaOrderStream

__all__ = ["InMemoryOrderStream", "KafkaOrderStream"]
