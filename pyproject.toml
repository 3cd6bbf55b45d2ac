[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "rtnlkit"
version = "0.12.0"
description = "Build and send rtnetlink requests for routes, neighbours, rules and traffic control"
requires-python = ">=3.10"
dependencies = []
keywords = ["netlink", "rtnetlink", "ip", "linux", "routing", "traffic-control"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
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
packages = ["rtnlkit"]

[tool.pytest.ini_options]
addopts = "-ra"
