import pytest

from fortiexporter.client import FortiClientError
from fortiexporter.metrics import MetricType, ProbeError, TargetMetadata, render
from fortiexporter.probes.ippool import probe_firewall_ip_pool


class FakeClient:
    def __init__(self, responses):
        self.responses = responses
        self.calls = []

    def get(self, path, query=""):
        self.calls.append((path, query))
        try:
            return self.responses[(path, query)]
        except KeyError:
            raise FortiClientError(f"unexpected request {path!r} {query!r}") from None


IPPOOL_RESPONSE = [
    {
        "vdom": "FG-traffic",
        "version": "v6.4.4",
        "results": {
            "ippool_name": {
                "name": "ippool_name",
                "natip_total": 1,
                "natip_in_use": 0,
                "clients": 0,
                "available": 100.0,
                "used": 0,
                "total": 472,
                "pba_per_ip": 472,
            }
        },
    }
]

EXPECTED = """\
# HELP fortigate_ippool_available_ratio Percentage available in ippool (0 - 1.0)
# TYPE fortigate_ippool_available_ratio gauge
fortigate_ippool_available_ratio{name="ippool_name",vdom="FG-traffic"} 1
# HELP fortigate_ippool_clients Amount of clients using ippool
# TYPE fortigate_ippool_clients gauge
fortigate_ippool_clients{name="ippool_name",vdom="FG-traffic"} 0
# HELP fortigate_ippool_pba_per_ip Amount of available port block allocations per ip
# TYPE fortigate_ippool_pba_per_ip gauge
fortigate_ippool_pba_per_ip{name="ippool_name",vdom="FG-traffic"} 472
# HELP fortigate_ippool_total_ips Ip addresses total in ippool
# TYPE fortigate_ippool_total_ips gauge
fortigate_ippool_total_ips{name="ippool_name",vdom="FG-traffic"} 1
# HELP fortigate_ippool_total_items Amount of items total in ippool
# TYPE fortigate_ippool_total_items gauge
fortigate_ippool_total_items{name="ippool_name",vdom="FG-traffic"} 472
# HELP fortigate_ippool_used_ips Ip addresses in use in ippool
# TYPE fortigate_ippool_used_ips gauge
fortigate_ippool_used_ips{name="ippool_name",vdom="FG-traffic"} 0
# HELP fortigate_ippool_used_items Amount of items used in ippool
# TYPE fortigate_ippool_used_items gauge
fortigate_ippool_used_items{name="ippool_name",vdom="FG-traffic"} 0
"""


def test_firewall_ip_pool():
    client = FakeClient({("api/v2/monitor/firewall/ippool", "vdom=*"): IPPOOL_RESPONSE})
    metrics = probe_firewall_ip_pool(client, TargetMetadata(7, 0))
    assert render(metrics) == EXPECTED
    assert all(m.type is MetricType.GAUGE for m in metrics)


def test_available_is_scaled_to_ratio():
    response = [
        {"vdom": "root", "results": {"p": {"name": "p", "available": 25.0}}},
    ]
    client = FakeClient({("api/v2/monitor/firewall/ippool", "vdom=*"): response})
    metrics = probe_firewall_ip_pool(client, TargetMetadata(7, 0))
    ratio = [m for m in metrics if m.name == "fortigate_ippool_available_ratio"]
    assert [m.value for m in ratio] == [0.25]
    assert len(metrics) == 7


def test_multiple_pools_give_one_set_each():
    response = [
        {"vdom": "root", "results": {"a": {"name": "a"}, "b": {"name": "b"}}},
        {"vdom": "other", "results": {}},
    ]
    client = FakeClient({("api/v2/monitor/firewall/ippool", "vdom=*"): response})
    metrics = probe_firewall_ip_pool(client, TargetMetadata(7, 0))
    assert len(metrics) == 14
    assert {m.labels["name"] for m in metrics} == {"a", "b"}


def test_client_error_raises_probe_error():
    client = FakeClient({})
    with pytest.raises(ProbeError):
        probe_firewall_ip_pool(client, TargetMetadata(7, 0))