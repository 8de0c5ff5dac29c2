"""OSPF neighbor probe."""

from fortiexporter.client import FortiClientError
from fortiexporter.metrics import Metric, MetricType, ProbeError

_HELP = (
    "List all discovered OSPF neighbors, return state as value (1 - Down, 2 - Attempt, "
    "3 - Init, 4 - Two way, 5 - Exchange start, 6 - Exchange, 7 - Loading, 8 - Full)"
)

_OSPF_STATES = {
    "Down": 1.0,
    "Attempt": 2.0,
    "Init": 3.0,
    "Two way": 4.0,
    "Exchange start": 5.0,
    "Exchange": 6.0,
    "Loading": 7.0,
    "Full": 8.0,
}


def ospf_state_to_number(state):
    """Map an OSPF state name to its number; unknown states count as Down."""
    return _OSPF_STATES.get(state, 1.0)


def probe_ospf_neighbors(client, meta):
    """Report discovered OSPF neighbors with their state as value."""
    if meta.version_major < 7:
        # Before 7.0.0 the requested endpoint does not exist.
        return []
    try:
        responses = client.get("api/v2/monitor/router/ospf/neighbors", "vdom=*")
    except FortiClientError as exc:
        raise ProbeError(str(exc)) from exc
    if responses is None:
        responses = []
    if not isinstance(responses, list):
        raise ProbeError("unexpected response shape for OSPF neighbors")

    metrics = []
    for response in responses:
        vdom = response.get("vdom", "")
        for peer in response.get("results") or []:
            state = peer.get("state", "")
            metrics.append(
                Metric(
                    name="fortigate_ospf_neighbor_info",
                    help=_HELP,
                    type=MetricType.GAUGE,
                    value=ospf_state_to_number(state),
                    labels={
                        "vdom": vdom,
                        "state": state,
                        "priority": str(int(peer.get("priority", 0))),
                        "router_id": peer.get("router_id", ""),
                        "neighbor_ip": peer.get("neighbor_ip", ""),
                    },
                )
            )
    return metrics