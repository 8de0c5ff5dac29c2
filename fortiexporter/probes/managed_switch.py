"""Managed FortiSwitch probe."""

from fortiexporter.client import FortiClientError
from fortiexporter.metrics import Metric, MetricType, ProbeError

_PATH = "api/v2/monitor/switch-controller/managed-switch/status"
# Limited to the first 1000 entries.
_QUERY = "vdom=*&start=0&poe=true&port_stats=true&transceiver=true&count=1000"

# (key in the port statistics entry, metric name, help text)
_PORT_STATS = (
    ("rx-bytes", "fortigate_managed_switch_rx_bytes_total", "Total number of received bytes"),
    ("tx-bytes", "fortigate_managed_switch_tx_bytes_total", "Total number of transmitted bytes"),
    ("rx-packets", "fortigate_managed_switch_rx_packets_total", "Total number of received packets"),
    ("tx-packets", "fortigate_managed_switch_tx_packets_total",
     "Total number of transmitted packets"),
    ("rx-ucast", "fortigate_managed_switch_rx_ucast_packets_total",
     "Total number of received unicast packets"),
    ("tx-ucast", "fortigate_managed_switch_tx_ucast_packets_total",
     "Total number of transmitted unicast packets"),
    ("rx-mcast", "fortigate_managed_switch_rx_mcast_packets_total",
     "Total number of received multicast packets"),
    ("tx-mcast", "fortigate_managed_switch_tx_mcast_packets_total",
     "Total number of transmitted multicast packets"),
    ("rx-bcast", "fortigate_managed_switch_rx_bcast_packets_total",
     "Total number of received broadcast packets"),
    ("tx-bcast", "fortigate_managed_switch_tx_bcast_packets_total",
     "Total number of transmitted broadcast packets"),
    ("rx-errors", "fortigate_managed_switch_rx_errors_total", "Total number of received errors"),
    ("tx-errors", "fortigate_managed_switch_tx_errors_total", "Total number of transmitted errors"),
    ("rx-drops", "fortigate_managed_switch_rx_drops_total", "Total number of received drops"),
    ("tx-drops", "fortigate_managed_switch_tx_drops_total", "Total number of transmitted drops"),
    ("rx-oversize", "fortigate_managed_switch_rx_oversize_total",
     "Total number of received oversize"),
    ("tx-oversize", "fortigate_managed_switch_tx_oversize_total",
     "Total number of transmitted oversize"),
    ("undersize", "fortigate_managed_switch_under_size_total", "Total number of under size"),
    ("fragments", "fortigate_managed_switch_fragments_total", "Total number of fragments"),
    ("jabbers", "fortigate_managed_switch_jabbers_total", "Total number of jabbers"),
    ("collisions", "fortigate_managed_switch_collisions_total", "Total number of collisions"),
    ("crc-alignments", "fortigate_managed_switch_crc_alignments_total",
     "Total number of crc alignments"),
    ("l3packets", "fortigate_managed_switch_l3_packets_total", "Total number of l3 packets"),
)


def _num(data, key):
    value = data.get(key)
    return 0.0 if value is None else float(value)


def _text(data, key):
    value = data.get(key)
    return "" if value is None else str(value)


def _metric(name, help_text, mtype, value, **labels):
    return Metric(name=name, help=help_text, type=mtype, value=float(value), labels=labels)


def _fetch_list(client):
    try:
        data = client.get(_PATH, _QUERY)
    except FortiClientError as exc:
        raise ProbeError(str(exc)) from exc
    if data is None:
        return []
    if not isinstance(data, list):
        raise ProbeError(f"unexpected response shape for {_PATH!r}")
    return data


def _port_metrics(vdom, switch, port):
    name = _text(port, "interface")
    status = _text(port, "status")
    base = {"vdom": vdom, "switch_name": switch, "port": name}
    return [
        _metric("fortigate_managed_switch_port_status", "Port status up=1 down=0",
                MetricType.GAUGE, 1.0 if status == "up" else 0.0, **base),
        _metric(
            "fortigate_managed_switch_port_info",
            "Infos about a switch port",
            MetricType.GAUGE,
            1,
            **base,
            vlan=_text(port, "vlan"),
            duplex=_text(port, "duplex"),
            status=status,
            poe_status=_text(port, "poe_status"),
            poe_capable="true" if port.get("poe_capable") else "false",
        ),
        _metric("fortigate_managed_switch_port_power_watt", "Port power in watt",
                MetricType.GAUGE, _num(port, "port_power"), **base),
        _metric("fortigate_managed_switch_port_power_status", "Port power status",
                MetricType.GAUGE, _num(port, "power_status"), **base),
    ]


def _port_stat_metrics(vdom, switch, port_name, stats):
    return [
        _metric(name, help_text, MetricType.COUNTER, _num(stats, key),
                vdom=vdom, switch_name=switch, port=port_name)
        for key, name, help_text in _PORT_STATS
    ]


def probe_managed_switch(client, meta):
    """Report managed switches, their ports and per-port traffic counters."""
    metrics = []
    for response in _fetch_list(client):
        for result in response.get("results") or []:
            vdom = _text(result, "vdom")
            switch = _text(result, "switch-id")
            metrics.append(
                _metric(
                    "fortigate_managed_switch_info",
                    "Infos about a managed switch",
                    MetricType.COUNTER,
                    1,
                    vdom=vdom,
                    switch_name=switch,
                    os_version=_text(result, "os_version"),
                    serial=_text(result, "serial"),
                    state=_text(result, "state"),
                    status=_text(result, "status"),
                )
            )
            metrics.append(
                _metric("fortigate_managed_switch_max_poe_budget_watt", "Max poe budget watt",
                        MetricType.COUNTER, _num(result, "max_poe_budget"),
                        vdom=vdom, switch_name=switch)
            )
            for port in result.get("ports") or []:
                metrics.extend(_port_metrics(vdom, switch, port))
            for port_name, stats in (result.get("port_stats") or {}).items():
                metrics.extend(_port_stat_metrics(vdom, switch, port_name, stats or {}))
    return metrics