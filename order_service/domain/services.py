"""
Name: Domain Service Interfaces

Responsibilities:
  - Define the inbound message stream contract consumed by ingestion

Collaborators:
  - infrastructure/stream/kafka_stream.KafkaOrderStream: production adapter
  - infrastructure/stream/in_memory_stream.InMemoryOrderStream: test double
  - application/ingestion_pipeline.OrderIngestionPipeline: consumer

Notes:
  - commit() acknowledges consumption progress up to and including the message
  - rewind() asks the stream to deliver the same message again (redelivery
    is the only retry driver for persistence failures)
"""

from typing import Optional, Protocol

from .entities import StreamMessage


class OrderMessageStream(Protocol):
    """R: Ordered, at-least-once stream of raw order payloads."""

    def poll(self, timeout: float) -> Optional[StreamMessage]:
        """
        R: Wait up to `timeout` seconds for the next message.

        Returns:
            StreamMessage or None if nothing arrived in time
        """
        ...

    def commit(self, message: StreamMessage) -> None:
        ...

    def rewind(self, message: StreamMessage) -> None:
        ...

    def close(self) -> None:
        ...
