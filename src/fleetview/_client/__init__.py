"""Internal helpers backing :class:`fleetview.client.FleetLiveClient`."""
