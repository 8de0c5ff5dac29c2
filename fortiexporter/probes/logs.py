"""Log disk usage and FortiAnalyzer probes."""

from fortiexporter.client import FortiClientError
from fortiexporter.metrics import Metric, MetricType, ProbeError


def _fetch_list(client, path):
    try:
        data = client.get(path, "vdom=*")
    except FortiClientError as exc:
        raise ProbeError(str(exc)) from exc
    if data is None:
        return []
    if not isinstance(data, list):
        raise ProbeError(f"unexpected response shape for {path!r}")
    return data


def _gauge(name, help_text, value, **labels):
    return Metric(name=name, help=help_text, type=MetricType.GAUGE, value=float(value), labels=labels)


def probe_log_current_disk_usage(client, meta):
    """Report used and total log disk bytes per VDOM."""
    metrics = []
    for response in _fetch_list(client, "api/v2/monitor/log/current-disk-usage"):
        vdom = response.get("vdom", "")
        results = response.get("results") or {}
        metrics.append(
            _gauge("fortigate_log_disk_used_bytes", "Disk used bytes for log",
                   results.get("used_bytes", 0), vdom=vdom)
        )
        metrics.append(
            _gauge("fortigate_log_disk_total_bytes", "Disk total bytes for log",
                   results.get("total_bytes", 0), vdom=vdom)
        )
    return metrics


def probe_log_analyzer(client, meta):
    """Report FortiAnalyzer registration state and received logs per VDOM."""
    metrics = []
    for response in _fetch_list(client, "api/v2/monitor/log/fortianalyzer"):
        vdom = response.get("vdom", "")
        results = response.get("results") or {}
        metrics.append(
            _gauge(
                "fortigate_log_fortianalyzer_registration_info",
                "Fortianalyzer state info",
                1,
                vdom=vdom,
                registration=results.get("registration", ""),
                connection=results.get("connection", ""),
            )
        )
        metrics.append(
            _gauge("fortigate_log_fortianalyzer_logs_received", "Received logs in fortianalyzer",
                   results.get("received", 0), vdom=vdom)
        )
    return metrics


def probe_log_analyzer_queue(client, meta):
    """Report the FortiAnalyzer queue connection and queued log counts per VDOM."""
    metrics = []
    for response in _fetch_list(client, "api/v2/monitor/log/fortianalyzer-queue"):
        vdom = response.get("vdom", "")
        results = response.get("results") or {}
        metrics.append(
            _gauge("fortigate_log_fortianalyzer_queue_connections",
                   "Fortianalyzer queue connected state", results.get("connected", 0), vdom=vdom)
        )
        # Failed and cached logs are treated as gauges.
        metrics.append(
            _gauge("fortigate_log_fortianalyzer_queue_logs", "State of logs in the queue",
                   results.get("failed_logs", 0), vdom=vdom, state="failed")
        )
        metrics.append(
            _gauge("fortigate_log_fortianalyzer_queue_logs", "State of logs in the queue",
                   results.get("cached_logs", 0), vdom=vdom, state="cached")
        )
    return metrics