[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mcastxfer"
version = "0.1.0"
description = "File transfer over IP multicast with per-chunk checksums and NAK-based retransmission"
requires-python = ">=3.10"
keywords = ["multicast", "udp", "file-transfer", "nak", "retransmission"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Communications :: File Sharing",
    "Topic :: System :: Networking",
]
dependencies = []

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
mcastxfer-send = "mcastxfer.sender:main"
mcastxfer-receive = "mcastxfer.receiver:main"

[tool.hatch.build.targets.wheel]
packages = ["mcastxfer"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
