[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "automqtt"
version = "0.1.0"
description = "Building blocks for a self-healing MQTT client: reconnect backoff, publish queues, error dispatch and demo settings"
requires-python = ">=3.10"
keywords = ["mqtt", "mqtt5", "reconnect", "backoff", "queue", "iot"]
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
    "Topic :: Communications",
    "Topic :: Internet",
    "Topic :: Software Development :: Libraries :: Python Modules",
]
dependencies = []

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
automqtt-backoff = "automqtt.backoff:main"

[tool.hatch.build.targets.wheel]
packages = ["automqtt"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]
