import pytest

from fortiexporter.client import FortiClientError
from fortiexporter.metrics import ProbeError, TargetMetadata, render
from fortiexporter.probes.logs import (
    probe_log_analyzer,
    probe_log_analyzer_queue,
    probe_log_current_disk_usage,
)


class FakeClient:
    def __init__(self):
        self.responses = {}
        self.calls = []

    def prepare(self, path, data):
        self.responses[path] = data

    def get(self, path, query=""):
        self.calls.append((path, query))
        if path not in self.responses:
            raise FortiClientError(f"Response code was 404, expected 200 (path: {path!r})")
        return self.responses[path]


META = TargetMetadata(version_major=7, version_minor=0)


def test_current_disk_usage():
    c = FakeClient()
    c.prepare(
        "api/v2/monitor/log/current-disk-usage",
        [{"vdom": "root", "results": {"used_bytes": 700000000, "total_bytes": 30000000000}}],
    )
    assert render(probe_log_current_disk_usage(c, META)) == (
        "# HELP fortigate_log_disk_total_bytes Disk total bytes for log\n"
        "# TYPE fortigate_log_disk_total_bytes gauge\n"
        'fortigate_log_disk_total_bytes{vdom="root"} 3e+10\n'
        "# HELP fortigate_log_disk_used_bytes Disk used bytes for log\n"
        "# TYPE fortigate_log_disk_used_bytes gauge\n"
        'fortigate_log_disk_used_bytes{vdom="root"} 7e+08\n'
    )
    assert c.calls == [("api/v2/monitor/log/current-disk-usage", "vdom=*")]


def test_log_analyzer():
    c = FakeClient()
    c.prepare(
        "api/v2/monitor/log/fortianalyzer",
        [
            {
                "vdom": "root",
                "results": {"registration": "registered", "connection": "allow", "received": 999},
            }
        ],
    )
    assert render(probe_log_analyzer(c, META)) == (
        "# HELP fortigate_log_fortianalyzer_logs_received Received logs in fortianalyzer\n"
        "# TYPE fortigate_log_fortianalyzer_logs_received gauge\n"
        'fortigate_log_fortianalyzer_logs_received{vdom="root"} 999\n'
        "# HELP fortigate_log_fortianalyzer_registration_info Fortianalyzer state info\n"
        "# TYPE fortigate_log_fortianalyzer_registration_info gauge\n"
        'fortigate_log_fortianalyzer_registration_info{connection="allow",'
        'registration="registered",vdom="root"} 1\n'
    )


def test_log_analyzer_queue():
    c = FakeClient()
    c.prepare(
        "api/v2/monitor/log/fortianalyzer-queue",
        [{"vdom": "root", "results": {"connected": 1, "failed_logs": 0, "cached_logs": 0}}],
    )
    assert render(probe_log_analyzer_queue(c, META)) == (
        "# HELP fortigate_log_fortianalyzer_queue_connections Fortianalyzer queue connected state\n"
        "# TYPE fortigate_log_fortianalyzer_queue_connections gauge\n"
        'fortigate_log_fortianalyzer_queue_connections{vdom="root"} 1\n'
        "# HELP fortigate_log_fortianalyzer_queue_logs State of logs in the queue\n"
        "# TYPE fortigate_log_fortianalyzer_queue_logs gauge\n"
        'fortigate_log_fortianalyzer_queue_logs{state="cached",vdom="root"} 0\n'
        'fortigate_log_fortianalyzer_queue_logs{state="failed",vdom="root"} 0\n'
    )


@pytest.mark.parametrize(
    "probe", [probe_log_current_disk_usage, probe_log_analyzer, probe_log_analyzer_queue]
)
def test_client_error(probe):
    with pytest.raises(ProbeError):
        probe(FakeClient(), META)


def test_wrong_shape():
    c = FakeClient()
    c.prepare("api/v2/monitor/log/fortianalyzer", {"vdom": "root"})
    with pytest.raises(ProbeError):
        probe_log_analyzer(c, META)