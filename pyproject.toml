[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "fortiexporter"
version = "1.0.0"
description = "Read FortiGate REST API statistics and turn them into Prometheus metrics"
requires-python = ">=3.10"
keywords = ["fortigate", "fortios", "prometheus", "exporter", "monitoring", "metrics"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking :: Monitoring",
]
dependencies = [
    "pyyaml>=6.0",
    "requests>=2.28",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
]

[tool.hatch.build.targets.wheel]
packages = ["fortiexporter"]

[tool.pytest.ini_options]
addopts = "-ra"
