"""HTTP API for stored government notices."""
