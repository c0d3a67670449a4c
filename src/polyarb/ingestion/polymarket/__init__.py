"""Polymarket Gamma REST client."""
