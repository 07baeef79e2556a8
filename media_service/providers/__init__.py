"""Concrete adapters for the provider interfaces: transport, catalog, enrichment, cache."""
