[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "protowire"
version = "0.6.1"
description = "Protocol Buffers wire-format primitives: varints, field keys, field skipping, bytes and string codecs"
requires-python = ">=3.10"
dependencies = []
keywords = ["protobuf", "protocol-buffers", "serialization", "varint", "wire-format"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest", "hypothesis"]

[tool.hatch.build.targets.wheel]
packages = ["protowire"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
strict = true
