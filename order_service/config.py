"""
Name: Application Configuration (Settings)

Responsibilities:
  - Centralized, typed configuration using pydantic-settings
  - Validate environment variables at startup
  - Provide defaults for stream, cache, store and HTTP concerns

Collaborators:
  - main.py: reads settings for pool init, warm start and shutdown deadline
  - container.py: reads settings to compose cache, repository and stream
  - logger.py: reads log level / JSON toggle

Constraints:
  - No business logic, pure configuration
  - Store/stream timeouts must stay bounded (validated > 0)

Notes:
  - Uses pydantic-settings for env parsing and validation
  - Singleton via lru_cache for performance
"""

from functools import lru_cache
from typing import Optional

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        database_url: PostgreSQL connection string
        app_env: Application environment (development/test/production)
        http_host: Bind address for the HTTP server
        http_port: HTTP port (default: 8081)
        kafka_brokers: Comma-separated Kafka bootstrap servers
        kafka_topic: Topic carrying order records
        kafka_group_id: Consumer group id
        kafka_poll_timeout_seconds: Per-poll timeout so shutdown is observed promptly
        ingestion_enabled: Start the stream consumer with the API process
        ingestion_failure_backoff_seconds: Pause after a non-acknowledged record
        cache_ttl_seconds: Entry TTL (0 disables expiry)
        cache_sweep_interval_seconds: Sweep cadence (default: ttl / 2)
        cache_payloads: Cache serialized orders (False = presence markers only)
        cache_blob_mirror: Mirror serialized orders to the order_cache table
        warm_start_enabled: Preload the cache from the store at boot
        warm_start_concurrency: Max concurrent store fetches during warm start
        store_timeout_seconds: Upper bound for a single store call
        db_pool_min_size / db_pool_max_size: Connection pool bounds
        shutdown_timeout_seconds: Deadline for in-flight work on shutdown
        log_level: Root log level for the service logger
        log_json: Emit JSON logs (False = plain text)
        debug_endpoints_enabled: Expose /debug/cache
    """

    # Required (no defaults)
    database_url: str

    # Environment
    app_env: str = "development"

    # HTTP
    http_host: str = "0.0.0.0"
    http_port: int = 8081

    # Stream (Kafka)
    kafka_brokers: str = "localhost:9092"
    kafka_topic: str = "orders"
    kafka_group_id: str = "order-consumer-group"
    kafka_poll_timeout_seconds: float = 0.5

    # Ingestion
    ingestion_enabled: bool = True
    ingestion_failure_backoff_seconds: float = 0.1

    # Cache
    cache_ttl_seconds: float = 30 * 60
    cache_sweep_interval_seconds: Optional[float] = None
    cache_payloads: bool = True
    cache_blob_mirror: bool = True

    # Warm start
    warm_start_enabled: bool = True
    warm_start_concurrency: int = 5

    # Database - Connection Pool
    store_timeout_seconds: float = 5.0
    db_pool_min_size: int = 2
    db_pool_max_size: int = 10

    # Lifecycle
    shutdown_timeout_seconds: float = 15.0

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    # Diagnostics
    debug_endpoints_enabled: bool = False

    @field_validator(
        "kafka_poll_timeout_seconds",
        "store_timeout_seconds",
        "shutdown_timeout_seconds",
    )
    @classmethod
    def timeout_must_be_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timeouts must be greater than 0")
        return v

    @field_validator("ingestion_failure_backoff_seconds")
    @classmethod
    def backoff_must_be_non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError("ingestion_failure_backoff_seconds must be >= 0")
        return v

    @field_validator("cache_ttl_seconds")
    @classmethod
    def ttl_must_be_non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError("cache_ttl_seconds must be >= 0")
        return v

    @field_validator("cache_sweep_interval_seconds")
    @classmethod
    def sweep_interval_must_be_positive(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v <= 0:
            raise ValueError("cache_sweep_interval_seconds must be greater than 0")
        return v

    @field_validator("warm_start_concurrency")
    @classmethod
    def concurrency_must_be_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("warm_start_concurrency must be greater than 0")
        return v

    @field_validator("log_level")
    @classmethod
    def log_level_valid(cls, v: str) -> str:
        level = (v or "INFO").strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError("log_level must be DEBUG, INFO, WARNING, ERROR or CRITICAL")
        return level

    @model_validator(mode="after")
    def validate_pool_bounds(self):
        if self.db_pool_min_size < 0 or self.db_pool_max_size <= 0:
            raise ValueError("db pool sizes must be positive")
        if self.db_pool_min_size > self.db_pool_max_size:
            raise ValueError(
                f"db_pool_min_size ({self.db_pool_min_size}) must not exceed "
                f"db_pool_max_size ({self.db_pool_max_size})"
            )
        return self

    def get_kafka_brokers_list(self) -> list[str]:
        """Parse comma-separated brokers into a list."""
        return [
            broker.strip() for broker in self.kafka_brokers.split(",") if broker.strip()
        ]

    def store_timeout_ms(self) -> int:
        return int(self.store_timeout_seconds * 1000)

    def is_production(self) -> bool:
        return self.app_env.strip().lower() == "production"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore unknown env vars
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get singleton Settings instance.

    Raises:
        ValidationError: If required env vars are missing or invalid
    """
    return Settings()
