"""Firewall IP pool probe."""

from fortiexporter.client import FortiClientError
from fortiexporter.metrics import Metric, MetricType, ProbeError

# (metric name, help text, function extracting the value from one pool entry)
_POOL_METRICS = (
    (
        "fortigate_ippool_available_ratio",
        "Percentage available in ippool (0 - 1.0)",
        lambda pool: float(pool.get("available", 0)) / 100,
    ),
    (
        "fortigate_ippool_used_ips",
        "Ip addresses in use in ippool",
        lambda pool: float(pool.get("natip_in_use", 0)),
    ),
    (
        "fortigate_ippool_total_ips",
        "Ip addresses total in ippool",
        lambda pool: float(pool.get("natip_total", 0)),
    ),
    (
        "fortigate_ippool_clients",
        "Amount of clients using ippool",
        lambda pool: float(pool.get("clients", 0)),
    ),
    (
        "fortigate_ippool_used_items",
        "Amount of items used in ippool",
        lambda pool: float(pool.get("used", 0)),
    ),
    (
        "fortigate_ippool_total_items",
        "Amount of items total in ippool",
        lambda pool: float(pool.get("total", 0)),
    ),
    (
        "fortigate_ippool_pba_per_ip",
        "Amount of available port block allocations per ip",
        lambda pool: float(pool.get("pba_per_ip", 0)),
    ),
)


def _fetch_list(client, path, query):
    try:
        data = client.get(path, query)
    except FortiClientError as exc:
        raise ProbeError(str(exc)) from exc
    if data is None:
        return []
    if not isinstance(data, list):
        raise ProbeError(f"unexpected response shape for {path!r}")
    return data


def probe_firewall_ip_pool(client, meta):
    """Report usage of every firewall IP pool per VDOM."""
    metrics = []
    for response in _fetch_list(client, "api/v2/monitor/firewall/ippool", "vdom=*"):
        vdom = response.get("vdom", "")
        for pool in (response.get("results") or {}).values():
            labels = {"vdom": vdom, "name": pool.get("name", "")}
            metrics.extend(
                Metric(
                    name=name,
                    help=help_text,
                    type=MetricType.GAUGE,
                    value=extract(pool),
                    labels=dict(labels),
                )
                for name, help_text, extract in _POOL_METRICS
            )
    return metrics