"""Application layer: use cases, codec and the ingestion pipeline."""
