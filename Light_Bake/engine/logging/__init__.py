"""JSON lines render logs and metrics."""
