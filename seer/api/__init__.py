"""HTTP API for seer."""
