"""
Name: Order Ingestion Pipeline

Responsibilities:
  - Pull records from the inbound stream one at a time, in delivery order
  - Hand each record to IngestOrderUseCase
  - Commit acknowledged records; rewind unacknowledged ones for redelivery

Collaborators:
  - domain/services.OrderMessageStream: poll / commit / rewind
  - application/use_cases/ingest_order.IngestOrderUseCase
  - worker/ingestion_worker.IngestionWorker: runs run() on a thread

Constraints:
  - Single consumer loop (no concurrent processing of one partition)
  - Stops promptly when stop_event is set (poll and backoff are bounded)
  - Never dies on a single bad record or a stream hiccup
"""

import threading

from ..domain.entities import StreamMessage
from ..domain.services import OrderMessageStream
from ..logger import logger
from .use_cases.ingest_order import IngestOrderUseCase
from .use_cases.order_results import IngestOrderResult, IngestOutcome


class OrderIngestionPipeline:
    """R: Consume the order stream until asked to stop."""

    def __init__(
        self,
        stream: OrderMessageStream,
        use_case: IngestOrderUseCase,
        *,
        poll_timeout_seconds: float = 0.5,
        failure_backoff_seconds: float = 0.1,
    ):
        self.stream = stream
        self.use_case = use_case
        self.poll_timeout_seconds = poll_timeout_seconds
        self.failure_backoff_seconds = failure_backoff_seconds

    def run(self, stop_event: threading.Event) -> None:
        logger.info("Ingestion pipeline started")
        while not stop_event.is_set():
            try:
                message = self.stream.poll(self.poll_timeout_seconds)
            except Exception:
                logger.exception("Stream read failed")
                stop_event.wait(self.failure_backoff_seconds)
                continue

            if message is None:
                continue

            result = self.process_one(message)
            if not result.acknowledge:
                # R: Bounded pause before the same record comes back
                stop_event.wait(self.failure_backoff_seconds)
        logger.info("Ingestion pipeline stopped")

    def process_one(self, message: StreamMessage) -> IngestOrderResult:
        """
        R: Process exactly one delivery and settle it on the stream.

        Returns:
            The use case result (acknowledge=False means the record was rewound)
        """
        try:
            result = self.use_case.execute(message.value)
        except Exception:
            logger.exception(
                "Unexpected error ingesting record",
                extra={"partition": message.partition, "offset": message.offset},
            )
            result = IngestOrderResult(outcome=IngestOutcome.FAILED, acknowledge=False)

        if result.acknowledge:
            try:
                self.stream.commit(message)
            except Exception:
                # R: Uncommitted record is redelivered and deduplicated by the cache
                logger.exception(
                    "Commit failed",
                    extra={"partition": message.partition, "offset": message.offset},
                )
        else:
            try:
                self.stream.rewind(message)
            except Exception:
                logger.exception(
                    "Rewind failed",
                    extra={"partition": message.partition, "offset": message.offset},
                )
        return result
