"""Metric values and the Prometheus text exposition format."""

import math
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

BUILD_INFO_NAME = "fortigate_exporter_build_info"
BUILD_INFO_HELP = "This info metric contains build information for about the exporter"


class MetricType(Enum):
    """Kind of a metric sample."""

    GAUGE = "gauge"
    COUNTER = "counter"


@dataclass
class Metric:
    """One sample: a name, its help text, type, value and labels."""

    name: str
    help: str
    type: MetricType
    value: float
    labels: dict = field(default_factory=dict)


@dataclass
class TargetMetadata:
    """What is known about the probed device before probing."""

    version_major: int = 0
    version_minor: int = 0


class ProbeError(Exception):
    """Raised when a probe cannot produce its metrics."""


def _format_value(value):
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if value == 0:
        return "-0" if math.copysign(1.0, value) < 0 else "0"
    sign, digit_tuple, exponent = Decimal(repr(value)).normalize().as_tuple()
    digits = "".join(map(str, digit_tuple))
    nd = len(digits)
    dp = nd + exponent
    exp = dp - 1
    prefix = "-" if sign else ""
    if exp < -4 or exp >= 6:
        mantissa = digits[0] + ("." + digits[1:] if nd > 1 else "")
        return f"{prefix}{mantissa}e{'-' if exp < 0 else '+'}{abs(exp):02d}"
    if dp <= 0:
        body = "0." + "0" * (-dp) + digits
    elif dp >= nd:
        body = digits + "0" * (dp - nd)
    else:
        body = digits[:dp] + "." + digits[dp:]
    return prefix + body


def _escape_label(value):
    return str(value).replace("\\", "\\\\").replace("\n", "\\n").replace('"', '\\"')


def _escape_help(text):
    return text.replace("\\", "\\\\").replace("\n", "\\n")


def render(metrics):
    """Render metrics as Prometheus text, families and samples sorted."""
    families = {}
    for metric in metrics:
        family = families.setdefault(metric.name, (metric.help, metric.type, {}))
        if family[0] != metric.help or family[1] != metric.type:
            raise ValueError(f"inconsistent help or type for metric {metric.name!r}")
        names = sorted(metric.labels)
        key = tuple((name, str(metric.labels[name])) for name in names)
        if key in family[2]:
            raise ValueError(f"duplicate metric {metric.name!r} with labels {dict(key)}")
        family[2][key] = metric.value

    lines = []
    for name in sorted(families):
        help_text, mtype, samples = families[name]
        lines.append(f"# HELP {name} {_escape_help(help_text)}")
        lines.append(f"# TYPE {name} {mtype.value}")
        for key in sorted(samples, key=lambda k: tuple(v for _, v in k)):
            label_text = ",".join(f'{n}="{_escape_label(v)}"' for n, v in key)
            series = f"{name}{{{label_text}}}" if key else name
            lines.append(f"{series} {_format_value(samples[key])}")
    return "".join(line + "\n" for line in lines)


def build_version(version):
    """Return the version with one leading ``v`` removed."""
    return version.removeprefix("v")


def build_info_metric(version, revision, python_version):
    """Return the info metric that carries build information."""
    return Metric(
        name=BUILD_INFO_NAME,
        help=BUILD_INFO_HELP,
        type=MetricType.GAUGE,
        value=1.0,
        labels={
            "version": version,
            "revision": revision,
            "pythonversion": python_version,
        },
    )