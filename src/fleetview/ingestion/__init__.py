"""Ingestion layer.

This package contains adapters that fetch/receive fleet data (REST
snapshot, MQTT live feed) and emit normalized feed events.
"""

__all__: list[str] = []
