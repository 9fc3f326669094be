"""HTTP API for notes and undercurrents."""
