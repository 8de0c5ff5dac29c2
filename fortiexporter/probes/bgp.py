"""BGP neighbor and path probes."""

from collections import Counter

from fortiexporter.client import FortiClientError
from fortiexporter.metrics import Metric, MetricType, ProbeError

_NEIGHBOR_HELP = (
    "Configured bgp neighbor over {family}, return state as value (1 - Idle, 2 - Connect, "
    "3 - Active, 4 - Open sent, 5 - Open confirm, 6 - Established)"
)
_PATHS_HELP = "Count of paths received from an BGP neighbor"
_BEST_PATHS_HELP = "Count of best paths for an BGP neighbor"

_BGP_STATES = {
    "Idle": 1.0,
    "Connect": 2.0,
    "Active": 3.0,
    "Open sent": 4.0,
    "Open confirm": 5.0,
    "Established": 6.0,
}


def bgp_state_to_number(state):
    """Map a BGP state name to its number; unknown states map to 0."""
    return _BGP_STATES.get(state, 0.0)


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


def _supported(meta):
    # Before 7.0.0 the requested endpoints do not exist.
    return meta.version_major >= 7


def _probe_paths(client, meta, config, path, family):
    max_paths = config.max_bgp_paths
    if max_paths == 0 or not _supported(meta):
        return []

    responses = _fetch_list(client, path, f"vdom=*&count={max_paths}")
    paths = Counter()
    best = Counter()
    for response in responses:
        results = response.get("results") or []
        if len(results) > max_paths:
            raise ProbeError(
                f"Received more BGP Paths than maximum ({len(results)} > {max_paths}) "
                "allowed, ignoring metric ..."
            )
        vdom = response.get("vdom", "")
        for route in results:
            key = (vdom, route.get("learned_from", ""))
            paths[key] += 1
            if route.get("is_best"):
                best[key] += 1

    def metrics(counter, name, help_text):
        return [
            Metric(
                name=name,
                help=help_text,
                type=MetricType.GAUGE,
                value=float(count),
                labels={"vdom": vdom, "neighbor_ip": source},
            )
            for (vdom, source), count in counter.items()
        ]

    return metrics(paths, f"fortigate_bgp_neighbor_{family}_paths", _PATHS_HELP) + metrics(
        best, f"fortigate_bgp_neighbor_{family}_best_paths", _BEST_PATHS_HELP
    )


def probe_bgp_neighbor_paths_ipv4(client, meta, config):
    """Count IPv4 BGP paths and best paths per neighbor."""
    return _probe_paths(client, meta, config, "api/v2/monitor/router/bgp/paths", "ipv4")


def probe_bgp_neighbor_paths_ipv6(client, meta, config):
    """Count IPv6 BGP paths and best paths per neighbor."""
    return _probe_paths(client, meta, config, "api/v2/monitor/router/bgp/paths6", "ipv6")


def _probe_neighbors(client, meta, path, family):
    if not _supported(meta):
        return []
    name = f"fortigate_bgp_neighbor_{family}_info"
    help_text = _NEIGHBOR_HELP.format(family=family)
    metrics = []
    for response in _fetch_list(client, path, "vdom=*"):
        vdom = response.get("vdom", "")
        for peer in response.get("results") or []:
            state = peer.get("state", "")
            metrics.append(
                Metric(
                    name=name,
                    help=help_text,
                    type=MetricType.GAUGE,
                    value=bgp_state_to_number(state),
                    labels={
                        "vdom": vdom,
                        "remote_as": str(int(peer.get("remote_as", 0))),
                        "state": state,
                        "admin_status": "true" if peer.get("admin_status") else "false",
                        "local_ip": peer.get("local_ip", ""),
                        "neighbor_ip": peer.get("neighbor_ip", ""),
                    },
                )
            )
    return metrics


def probe_bgp_neighbors_ipv4(client, meta):
    """Report configured IPv4 BGP neighbors with their state as value."""
    return _probe_neighbors(client, meta, "api/v2/monitor/router/bgp/neighbors", "ipv4")


def probe_bgp_neighbors_ipv6(client, meta):
    """Report configured IPv6 BGP neighbors with their state as value."""
    return _probe_neighbors(client, meta, "api/v2/monitor/router/bgp/neighbors6", "ipv6")