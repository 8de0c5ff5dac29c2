"""Firewall load balancer probe."""

import logging
import math

from fortiexporter.client import FortiClientError
from fortiexporter.metrics import Metric, MetricType, ProbeError

log = logging.getLogger(__name__)

_RTT_HELP = (
    "Round Trip Time (RTT) for this real server. A RTT of 1 ms or less is reported as "
    "1 ms (0.001 s). A RTT of -1 indicates a parsing error."
)

_MODES = ("active", "standby", "disabled")


def parse_rtt(rtt):
    """Convert a RTT in milliseconds as reported by FortiOS to seconds.

    ``"<1"`` is reported as 1 ms; an empty or unparsable value gives NaN.
    """
    if rtt == "<1":
        return 0.001
    if rtt == "":
        return math.nan
    try:
        return float(rtt) / 1000
    except (TypeError, ValueError) as exc:
        log.warning("Failed to parse RTT value: %s", exc)
        return math.nan


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


def _gauge(name, help_text, value, **labels):
    return Metric(name=name, help=help_text, type=MetricType.GAUGE, value=float(value), labels=labels)


def _real_server_metrics(vdom, virtual_name, server):
    server_id = str(int(server.get("real_server_id", 0)))
    base = {"vdom": vdom, "virtual_server": virtual_name, "id": server_id}
    mode = server.get("mode", "")
    status = server.get("status", "")
    status_values = {
        "up": 1.0 if status == "up" else 0.0,
        "down": 1.0 if status == "down" else 0.0,
        "unknown": 0.0 if status in ("up", "down") else 1.0,
    }

    metrics = [
        _gauge(
            "fortigate_lb_real_server_info",
            "Info metric regarding real servers",
            1,
            **base,
            ip=server.get("real_server_ip", ""),
            port=str(int(server.get("real_server_port", 0))),
        )
    ]
    metrics.extend(
        _gauge(
            "fortigate_lb_real_server_mode",
            "Mode of this real server: active, standby or disabled",
            1.0 if mode == candidate else 0.0,
            **base,
            mode=candidate,
        )
        for candidate in _MODES
    )
    metrics.extend(
        _gauge(
            "fortigate_lb_real_server_status",
            "Status of this real server: up, down or unknown",
            value,
            **base,
            state=state,
        )
        for state, value in status_values.items()
    )
    metrics.append(
        _gauge(
            "fortigate_lb_real_server_active_sessions",
            "Number of sessions active on this real server",
            server.get("active_sessions", 0),
            **base,
        )
    )
    metrics.append(
        _gauge(
            "fortigate_lb_real_server_rtt_seconds",
            _RTT_HELP,
            parse_rtt(server.get("RTT", "")),
            **base,
        )
    )
    metrics.append(
        Metric(
            name="fortigate_lb_real_server_processed_bytes_total",
            help="Number of bytes processed by this real server",
            type=MetricType.COUNTER,
            value=float(server.get("bytes_processed", 0)),
            labels=dict(base),
        )
    )
    return metrics


def probe_firewall_load_balance(client, meta):
    """Report virtual servers and the state of their real servers."""
    if meta.version_major < 6 or (meta.version_major == 6 and meta.version_minor < 4):
        # Before 6.4.0 there is no real_server_id.
        return []

    # Limited to the first 1000 entries.
    responses = _fetch_list(
        client, "api/v2/monitor/firewall/load-balance", "vdom=*&start=0&count=1000"
    )
    metrics = []
    for response in responses:
        vdom = response.get("vdom", "")
        for virtual in response.get("results") or []:
            virtual_name = virtual.get("virtual_server_name", "")
            metrics.append(
                _gauge(
                    "fortigate_lb_virtual_server_info",
                    "Info metric regarding virtual servers",
                    1,
                    vdom=vdom,
                    name=virtual_name,
                    ip=virtual.get("virtual_server_ip", ""),
                    port=str(int(virtual.get("virtual_server_port", 0))),
                    type=virtual.get("virtual_server_type", ""),
                )
            )
            for server in virtual.get("list") or []:
                metrics.extend(_real_server_metrics(vdom, virtual_name, server))
    return metrics