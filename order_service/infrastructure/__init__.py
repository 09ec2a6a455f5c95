"""Infrastructure adapters (cache, PostgreSQL, Kafka)."""
