"""
Name: Dependency Injection Container

Responsibilities:
  - Wire the cache, repository, stream and use cases into one ServiceContainer
  - Provide FastAPI dependency functions for endpoints

Collaborators:
  - infrastructure: FingerprintCache, PostgresOrderRepository, KafkaOrderStream
  - application.use_cases: IngestOrderUseCase, LookupOrderUseCase, WarmStartLoader
  - main.py lifespan: builds the container and stores it on app.state

Constraints:
  - Manual DI (no library like dependency-injector)
  - Explicit instances, no module-level cache singleton: tests build their
    own container with in-memory doubles

Notes:
  - This is the composition root (where dependencies are wired)
  - The stream is created lazily by stream_factory so warm start never
    connects to Kafka
"""

import threading
from dataclasses import dataclass, field
from typing import Callable, Optional

from fastapi import Request

from .application.ingestion_pipeline import OrderIngestionPipeline
from .application.use_cases import (
    IngestOrderUseCase,
    LookupOrderUseCase,
    WarmStartLoader,
    WarmStartReport,
)
from .config import Settings
from .domain.repositories import OrderRepository
from .domain.services import OrderMessageStream
from .infrastructure.cache import FingerprintCache
from .infrastructure.repositories import PostgresOrderRepository
from .infrastructure.stream import KafkaOrderStream
from .rendering import OrderPageRenderer
from .worker.ingestion_worker import IngestionWorker


@dataclass
class ServiceContainer:
    settings: Settings
    cache: FingerprintCache
    repository: OrderRepository
    stream_factory: Callable[[], OrderMessageStream]
    lookup_use_case: LookupOrderUseCase
    ingest_use_case: IngestOrderUseCase
    renderer: OrderPageRenderer
    stop_event: threading.Event = field(default_factory=threading.Event)
    worker: Optional[IngestionWorker] = None
    warm_start_report: Optional[WarmStartReport] = None

    @property
    def warm_start_done(self) -> bool:
        return self.warm_start_report is not None

    def run_warm_start(self) -> WarmStartReport:
        if self.settings.warm_start_enabled:
            loader = WarmStartLoader(
                self.repository,
                self.cache,
                max_workers=self.settings.warm_start_concurrency,
                cache_payloads=self.settings.cache_payloads,
                use_blob_mirror=self.settings.cache_blob_mirror,
            )
            self.warm_start_report = loader.load()
        else:
            self.warm_start_report = WarmStartReport()
        return self.warm_start_report

    def start_ingestion(self) -> Optional[IngestionWorker]:
        if not self.settings.ingestion_enabled:
            return None
        stream = self.stream_factory()
        pipeline = OrderIngestionPipeline(
            stream,
            self.ingest_use_case,
            poll_timeout_seconds=self.settings.kafka_poll_timeout_seconds,
            failure_backoff_seconds=self.settings.ingestion_failure_backoff_seconds,
        )
        self.worker = IngestionWorker(pipeline, stream, self.stop_event)
        self.worker.start()
        return self.worker

    def shutdown(self) -> None:
        """R: Stop ingestion within the deadline, then stop the cache sweeper."""
        self.stop_event.set()
        if self.worker is not None:
            self.worker.stop(self.settings.shutdown_timeout_seconds)
        self.cache.close()


def build_container(
    settings: Settings,
    *,
    repository: Optional[OrderRepository] = None,
    stream_factory: Optional[Callable[[], OrderMessageStream]] = None,
    cache: Optional[FingerprintCache] = None,
) -> ServiceContainer:
    """R: Build the container; production adapters unless overridden."""
    cache = cache or FingerprintCache(
        settings.cache_ttl_seconds,
        sweep_interval_seconds=settings.cache_sweep_interval_seconds,
    )
    repository = repository or PostgresOrderRepository(
        timeout_seconds=settings.store_timeout_seconds
    )
    if stream_factory is None:

        def stream_factory() -> OrderMessageStream:
            return KafkaOrderStream(
                settings.get_kafka_brokers_list(),
                settings.kafka_topic,
                settings.kafka_group_id,
            )

    return ServiceContainer(
        settings=settings,
        cache=cache,
        repository=repository,
        stream_factory=stream_factory,
        lookup_use_case=LookupOrderUseCase(
            repository, cache, cache_payloads=settings.cache_payloads
        ),
        ingest_use_case=IngestOrderUseCase(
            repository,
            cache,
            cache_payloads=settings.cache_payloads,
            mirror_blobs=settings.cache_blob_mirror,
        ),
        renderer=OrderPageRenderer(),
    )


# R: FastAPI dependencies
def get_container(request: Request) -> ServiceContainer:
    return request.app.state.container


def get_lookup_order_use_case(request: Request) -> LookupOrderUseCase:
    return get_container(request).lookup_use_case


def get_order_renderer(request: Request) -> OrderPageRenderer:
    return get_container(request).renderer
