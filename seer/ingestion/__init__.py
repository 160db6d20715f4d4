"""Ingestion: source adapters, the fan-out fetcher and the fetch scheduler."""
