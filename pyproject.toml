[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "servkit"
version = "0.1.0"
description = "Server building blocks: skip lists, leaderboards, in-memory topic queues, pub/sub, buffer pools and small utilities"
requires-python = ">=3.10"
keywords = ["skiplist", "leaderboard", "ranking", "pubsub", "ring-buffer", "utilities"]
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
    "Topic :: Software Development :: Libraries",
]
dependencies = [
    "cryptography",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["servkit"]

[tool.pytest.ini_options]
addopts = "-ra"
