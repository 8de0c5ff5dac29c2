"""Probes that turn FortiGate API responses into lists of metrics."""