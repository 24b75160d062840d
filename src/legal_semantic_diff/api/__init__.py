"""HTTP API for the legal semantic diff engine."""
