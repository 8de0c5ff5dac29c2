"""Command line options and the authentication map of the exporter."""

import argparse
import logging
from dataclasses import dataclass, field

import yaml

log = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised when the configuration cannot be loaded."""


@dataclass(frozen=True)
class LocalCert:
    """A PEM file trusted in addition to the system store."""

    path: str
    content: bytes


@dataclass(frozen=True)
class Probes:
    """Probe names to include or exclude for a target."""

    include: tuple = ()
    exclude: tuple = ()


@dataclass(frozen=True)
class TargetAuth:
    """Credentials and probe selection for one target."""

    token: str = ""
    probes: Probes = field(default_factory=Probes)


@dataclass
class ExporterConfig:
    """Effective configuration of the exporter."""

    auth_keys: dict = field(default_factory=dict)
    listen: str = ":9710"
    scrape_timeout: int = 30
    tls_timeout: int = 10
    tls_insecure: bool = False
    tls_extra_cas: list = field(default_factory=list)
    max_bgp_paths: int = 10000
    max_vpn_users: int = 0


def build_parser():
    """Return the argument parser for the exporter's options."""
    parser = argparse.ArgumentParser(prog="fortigate-exporter")
    parser.add_argument(
        "-auth-file", "--auth-file", dest="auth_file", default="fortigate-key.yaml",
        help="file containing the authentication map to use when connecting to a Fortigate device",
    )
    parser.add_argument(
        "-listen", "--listen", dest="listen", default=":9710", help="address to listen on"
    )
    parser.add_argument(
        "-scrape-timeout", "--scrape-timeout", dest="scrape_timeout", type=int, default=30,
        help="max seconds to allow a scrape to take",
    )
    parser.add_argument(
        "-https-timeout", "--https-timeout", dest="tls_timeout", type=int, default=10,
        help="TLS Handshake timeout in seconds",
    )
    parser.add_argument(
        "-insecure", "--insecure", dest="insecure", action="store_true",
        help="Allow insecure certificates",
    )
    parser.add_argument(
        "-extra-ca-certs", "--extra-ca-certs", dest="extra_ca_certs", default="",
        help="comma-separated files containing extra PEMs to trust for TLS connections "
        "in addition to the system trust store",
    )
    parser.add_argument(
        "-max-bgp-paths", "--max-bgp-paths", dest="max_bgp_paths", type=int, default=10000,
        help="How many BGP Paths to receive when counting routes, needs to be greater than "
        "or equal to the number of routes or metrics will not be generated",
    )
    parser.add_argument(
        "-max-vpn-users", "--max-vpn-users", dest="max_vpn_users", type=int, default=0,
        help="How many VPN Users to receive when counting users, needs to be greater than "
        "or equal the number of users or metrics will not be generated (0 eq. none by default)",
    )
    return parser


def _scalar(value, what):
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        raise ConfigError(f"{what} must be a scalar")
    return str(value)


def _probe_list(value, what):
    if value is None:
        return ()
    if not isinstance(value, list):
        raise ConfigError(f"{what} must be a list")
    return tuple(_scalar(item, what) for item in value)


def _target_auth(target, entry):
    if entry is None:
        return TargetAuth()
    if not isinstance(entry, dict):
        raise ConfigError(f"authentication entry for {target!r} must be a mapping")
    probes = entry.get("probes") or {}
    if not isinstance(probes, dict):
        raise ConfigError(f"probes for {target!r} must be a mapping")
    return TargetAuth(
        token=_scalar(entry.get("token"), f"token for {target!r}"),
        probes=Probes(
            include=_probe_list(probes.get("include"), f"probes.include for {target!r}"),
            exclude=_probe_list(probes.get("exclude"), f"probes.exclude for {target!r}"),
        ),
    )


def parse_auth_keys(text):
    """Parse the YAML authentication map into ``{target: TargetAuth}``."""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse API authentication map file: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError("API authentication map must be a mapping")
    return {str(target): _target_auth(target, entry) for target, entry in data.items()}


def _read_file(path, what):
    try:
        with open(path, "rb") as fh:
            return fh.read()
    except OSError as exc:
        raise ConfigError(f"Failed to read {what} {path!r}: {exc}") from exc


def load_config(argv=None):
    """Parse the command line and load the files it names."""
    args = build_parser().parse_args(argv)
    raw = _read_file(args.auth_file, "API authentication map file")
    auth_keys = parse_auth_keys(raw.decode("utf-8", errors="replace"))
    log.info("Loaded %d API keys", len(auth_keys))

    extra_cas = [
        LocalCert(path=path, content=_read_file(path, "extra CA file"))
        for path in args.extra_ca_certs.split(",")
        if path
    ]
    return ExporterConfig(
        auth_keys=auth_keys,
        listen=args.listen,
        scrape_timeout=args.scrape_timeout,
        tls_timeout=args.tls_timeout,
        tls_insecure=args.insecure,
        tls_extra_cas=extra_cas,
        max_bgp_paths=args.max_bgp_paths,
        max_vpn_users=args.max_vpn_users,
    )