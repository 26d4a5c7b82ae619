"""HTTP API for inspecting and re-evaluating a loaded configuration."""
