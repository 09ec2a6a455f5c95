"""
Name: Ingestion Worker

Responsibilities:
  - Run the ingestion pipeline on a dedicated daemon thread
  - Stop it within a deadline on shutdown and release the stream

Collaborators:
  - application/ingestion_pipeline.OrderIngestionPipeline
  - domain/services.OrderMessageStream: closed after the loop exits
  - main.py lifespan: start() after warm start, stop() on shutdown

Notes:
  - The stop event is shared with the rest of the process; setting it is
    the only way to end the loop
"""

import threading
from typing import Optional

from ..application.ingestion_pipeline import OrderIngestionPipeline
from ..domain.services import OrderMessageStream
from ..logger import logger


class IngestionWorker:
    def __init__(
        self,
        pipeline: OrderIngestionPipeline,
        stream: OrderMessageStream,
        stop_event: threading.Event,
    ):
        self.pipeline = pipeline
        self.stream = stream
        self.stop_event = stop_event
        self._thread: Optional[threading.Thread] = None

    def start(self) -> None:
        if self._thread is not None:
            raise RuntimeError("Ingestion worker already started")
        self._thread = threading.Thread(
            target=self._run, name="order-ingestion", daemon=True
        )
        self._thread.start()
        logger.info("Ingestion worker started")

    def _run(self) -> None:
        try:
            self.pipeline.run(self.stop_event)
        except Exception:
            logger.exception("Ingestion worker crashed")

    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def stop(self, timeout: float) -> bool:
        """
        R: Signal stop, wait up to `timeout` seconds, close the stream.

        Returns:
            True if the thread exited within the deadline
        """
        self.stop_event.set()
        stopped = True
        if self._thread is not None:
            self._thread.join(timeout)
            if self._thread.is_alive():
                stopped = False
                logger.error(
                    "Ingestion worker did not stop within deadline; forcing shutdown",
                    extra={"timeout_seconds": timeout},
                )

        try:
            self.stream.close()
        except Exception:
            logger.exception("Failed to close order stream")

        if stopped:
            logger.info("Ingestion worker stopped")
        return stopped
