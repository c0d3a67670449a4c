"""Venue ingestion - REST discovery clients."""
