"""Read FortiGate REST API statistics and turn them into Prometheus metrics."""

__version__ = "1.0.0"