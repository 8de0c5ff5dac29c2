"""Firewall policy statistics probe."""

import logging

from fortiexporter.client import FortiClientError
from fortiexporter.metrics import Metric, MetricType, ProbeError
from fortiexporter.version import parse_version

log = logging.getLogger(__name__)

_STATS_PATH = "api/v2/monitor/firewall/policy/select"
_STATS6_PATH = "api/v2/monitor/firewall/policy6/select"
_CONFIG_PATH = "api/v2/cmdb/firewall/policy"
_CONFIG6_PATH = "api/v2/cmdb/firewall/policy6"
_CONFIG_QUERY = "vdom=*&policyid|name|uuid|action|status"

_IMPLICIT_DENY = "Implicit Deny"
_UNKNOWN = "<UNKNOWN>"

# (metric name, help text, type, key in the statistics entry)
_POLICY_METRICS = (
    (
        "fortigate_policy_hit_count_total",
        "Number of times a policy has been hit",
        MetricType.COUNTER,
        "hit_count",
    ),
    (
        "fortigate_policy_bytes_total",
        "Number of bytes that has passed through a policy",
        MetricType.COUNTER,
        "bytes",
    ),
    (
        "fortigate_policy_packets_total",
        "Number of packets that has passed through a policy",
        MetricType.COUNTER,
        "packets",
    ),
    (
        "fortigate_policy_active_sessions",
        "Number of active sessions for a policy",
        MetricType.GAUGE,
        "active_sessions",
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


def _config_map(responses):
    return {
        policy.get("uuid", ""): policy
        for response in responses
        for policy in response.get("results") or []
    }


def _policy_name(stats, config_map):
    if int(stats.get("policyid", 0)) <= 0:
        return _IMPLICIT_DENY
    uuid = stats.get("uuid", "")
    config = config_map.get(uuid)
    if config is None:
        log.warning("Failed to map %r to policy config - this should not happen", uuid)
        return _UNKNOWN
    return config.get("name", "")


def _policy_metrics(responses, config_map, protocol):
    metrics = []
    for response in responses:
        vdom = response.get("vdom", "")
        for stats in response.get("results") or []:
            labels = {
                "vdom": vdom,
                "protocol": protocol,
                "name": _policy_name(stats, config_map),
                "uuid": stats.get("uuid", ""),
                "id": str(int(stats.get("policyid", 0))),
            }
            metrics.extend(
                Metric(
                    name=name,
                    help=help_text,
                    type=mtype,
                    value=float(stats.get(key, 0)),
                    labels=dict(labels),
                )
                for name, help_text, mtype, key in _POLICY_METRICS
            )
    return metrics


def probe_firewall_policies(client, meta):
    """Report hit count, traffic and sessions of every IPv4 and IPv6 policy."""
    # ip_version=ipv4 has no effect when policies are not combined.
    stats4 = _fetch_list(client, _STATS_PATH, "vdom=*&ip_version=ipv4")
    if not stats4:
        raise ProbeError("empty firewall policy statistics response")
    version = stats4[0].get("version") or ""
    try:
        major, minor = parse_version(version)
    except ValueError as exc:
        raise ProbeError(f"Could not parse version number {version!r}") from exc

    # From 6.4 on IPv4 and IPv6 policies are combined.
    combined = major > 6 or (major == 6 and minor >= 4)
    if combined:
        stats6 = _fetch_list(client, _STATS_PATH, "vdom=*&ip_version=ipv6")
    else:
        stats6 = _fetch_list(client, _STATS6_PATH, "vdom=*")

    config4 = _config_map(_fetch_list(client, _CONFIG_PATH, _CONFIG_QUERY))
    if combined:
        config6 = config4
    else:
        config6 = _config_map(_fetch_list(client, _CONFIG6_PATH, _CONFIG_QUERY))

    return _policy_metrics(stats4, config4, "ipv4") + _policy_metrics(stats6, config6, "ipv6")