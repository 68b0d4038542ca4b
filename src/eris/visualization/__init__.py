"""Offline trajectory plots built from engine telemetry."""
