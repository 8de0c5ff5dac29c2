# fortiexporter

`fortiexporter` is a library that reads the REST API of FortiGate
firewalls and turns the answers into metrics in the Prometheus text
exposition format.

## What it collects

Each probe reads one part of the FortiGate API and returns a list of
`Metric` objects:

| Module | Probe functions | Metrics |
|---|---|---|
| `fortiexporter.probes.bgp` | `probe_bgp_neighbors_ipv4`, `probe_bgp_neighbors_ipv6`, `probe_bgp_neighbor_paths_ipv4`, `probe_bgp_neighbor_paths_ipv6` | `fortigate_bgp_neighbor_*` |
| `fortiexporter.probes.ospf` | `probe_ospf_neighbors` | `fortigate_ospf_neighbor_info` |
| `fortiexporter.probes.license` | `probe_license_status` | `fortigate_license_vdom_*` |
| `fortiexporter.probes.logs` | `probe_log_current_disk_usage`, `probe_log_analyzer`, `probe_log_analyzer_queue` | `fortigate_log_*` |
| `fortiexporter.probes.ippool` | `probe_firewall_ip_pool` | `fortigate_ippool_*` |
| `fortiexporter.probes.load_balance` | `probe_firewall_load_balance` | `fortigate_lb_*` |
| `fortiexporter.probes.policy` | `probe_firewall_policies` | `fortigate_policy_*` |
| `fortiexporter.probes.managed_switch` | `probe_managed_switch` | `fortigate_managed_switch_*` |

Every probe is called as `probe(client, meta)`, where `meta` is a
`TargetMetadata` holding the device's firmware version. The two BGP path
probes take the `ExporterConfig` as a third argument:
`probe_bgp_neighbor_paths_ipv4(client, meta, config)`.

- The BGP, BGP path and OSPF probes return an empty list on FortiOS
  older than 7.0.
- The BGP path probes return an empty list when `max_bgp_paths` is 0 and
  raise `ProbeError` when a VDOM reports more paths than `max_bgp_paths`.
- The load-balancer probe returns an empty list on FortiOS older than
  6.4. Its helper `parse_rtt` turns a RTT in milliseconds into seconds:
  `"<1"` gives `0.001`, an empty or unparsable value gives NaN.
- The policy probe reads the firmware version from the statistics it
  receives and, from 6.4 on, uses the combined IPv4/IPv6 policy endpoints.
- `bgp_state_to_number` and `ospf_state_to_number` give the numbers used
  as metric values for neighbor states.

A probe raises `ProbeError` when the device cannot be read or answers
with data of an unexpected shape.

## Authentication file

Targets and their API tokens live in a YAML file, by default
`fortigate-key.yaml`. Token authentication works over HTTPS only.

```yaml
"https://192.0.2.1":
  token: token
  probes:
    include: []
    exclude: []
```

`parse_auth_keys(text)` turns this text into a dict of target to
`TargetAuth` (with `token` and `probes`, a `Probes` holding `include` and
`exclude`). The probe lists are read and kept; nothing in the package
acts on them.

## Configuration

`fortiexporter.config.load_config(argv)` parses command-line style
options (from `sys.argv` when `argv` is `None`), reads the files they
name and returns an `ExporterConfig`:

```python
from fortiexporter.config import load_config

config = load_config([
    "--auth-file", "fortigate-key.yaml",
    "--scrape-timeout", "30",
    "--max-bgp-paths", "10000",
])
```

Options, with their defaults (each is accepted with one or two dashes):

- `--auth-file` (`fortigate-key.yaml`): authentication map
- `--listen` (`:9710`): address to listen on, stored as `listen`
- `--scrape-timeout` (`30`): used as the request timeout of the client, in seconds
- `--https-timeout` (`10`): connect timeout of HTTPS requests, in seconds
- `--insecure`: do not verify certificates
- `--extra-ca-certs`: comma-separated PEM files to trust besides the system store
- `--max-bgp-paths` (`10000`): BGP paths to request when counting routes
- `--max-vpn-users` (`0`): stored as `max_vpn_users`

`build_parser()` returns the `argparse` parser for these options. A file
that cannot be read or parsed raises `ConfigError`.

## Talking to a FortiGate

```python
import requests

from fortiexporter.client import configure_session, new_forti_client
from fortiexporter.metrics import TargetMetadata, render
from fortiexporter.probes.license import probe_license_status

session = requests.Session()
configure_session(session, config)
client = new_forti_client("https://192.0.2.1", session, config)

metrics = probe_license_status(client, TargetMetadata(version_major=7, version_minor=0))
print(render(metrics))
```

`configure_session` trusts the extra CA files, applies `--insecure` and
the HTTPS timeout, and returns the `ssl.SSLContext` it built.
`new_forti_client` returns a `TokenClient` for a target listed in the
authentication map; it raises `FortiClientError` for an unknown target,
a token target that is not HTTPS, or an entry without a token.

`TokenClient.get(path, query)` sends a GET with a bearer token, returns
the decoded JSON body and raises `FortiClientError` on a transport error,
any status other than 200, or a body that is not JSON.

## Metrics

`fortiexporter.metrics` holds `Metric` (name, help, `MetricType` gauge or
counter, value, labels) and `render(metrics)`, which writes the metrics
as Prometheus text with families and samples sorted and raises
`ValueError` on duplicate samples or mismatched help or type.
`build_info_metric(version, revision, python_version)` gives the
`fortigate_exporter_build_info` metric, and `build_version` strips one
leading `v` from a version string.

## Firmware versions

```python
from fortiexporter.version import parse_version

parse_version("v6.4.4")  # (6, 4)
```

`parse_version` raises `ValueError` for a string not of the form
`v<major>.<minor>.`.

## What it does not do

The package has no command and no HTTP server: it does not listen on the
`--listen` address and serves no `/metrics` or `/probe` endpoint. It
does not find out a device's firmware version on its own; the caller
fills in `TargetMetadata`. There is no VPN user probe, so `max_vpn_users`
is only stored.