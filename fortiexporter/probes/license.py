"""License status probe."""

from fortiexporter.client import FortiClientError
from fortiexporter.metrics import Metric, MetricType, ProbeError


def probe_license_status(client, meta):
    """Report VDOM license usage and capacity."""
    try:
        response = client.get("api/v2/monitor/license/status/select", "")
    except FortiClientError as exc:
        raise ProbeError(str(exc)) from exc
    if not isinstance(response, dict):
        raise ProbeError("unexpected response shape for license status")
    vdom = (response.get("results") or {}).get("vdom") or {}
    return [
        Metric(
            name="fortigate_license_vdom_usage",
            help="The amount of VDOM licenses currently used",
            type=MetricType.GAUGE,
            value=float(vdom.get("used", 0)),
        ),
        Metric(
            name="fortigate_license_vdom_max",
            help="The total amount of VDOM licenses available",
            type=MetricType.GAUGE,
            value=float(vdom.get("max", 0)),
        ),
    ]