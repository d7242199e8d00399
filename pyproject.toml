[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "varkproxy"
version = "0.1.0"
description = "DHCP lease records, lease cache and aardvark-dns configuration management for container networks"
requires-python = ">=3.10"
dependencies = []
keywords = ["dhcp", "containers", "networking", "dns", "lease", "aardvark"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: System Administrators",
    "Intended Audience :: Developers",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["varkproxy"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]
