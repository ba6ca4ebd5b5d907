"""CLI output — result contract, Rich rendering, and JSON formatting."""
