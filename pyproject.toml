[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "deepnet"
version = "0.1.0"
description = "Network toolkit: raw packet crafting, packet sniffing and port scanning"
requires-python = ">=3.10"
keywords = ["network", "packet", "sniffer", "port-scanner", "raw-socket", "checksum"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: X11 Applications",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking :: Monitoring",
]
dependencies = [
    "psutil",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.gui-scripts]
deepnet = "deepnet.app:main"

[tool.hatch.build.targets.wheel]
packages = ["deepnet"]

[tool.pytest.ini_options]
addopts = "-ra"
