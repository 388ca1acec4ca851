[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mmsim"
version = "0.1.0"
description = "Market maker simulator for ETH/USDC using aggregated live quotes"
requires-python = ">=3.10"
dependencies = [
    "aiohttp",
]
keywords = ["market-making", "simulation", "trading", "eth", "usdc", "pnl"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Framework :: AsyncIO",
    "Intended Audience :: Financial and Insurance Industry",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business :: Financial :: Investment",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[project.scripts]
market-maker = "mmsim.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["mmsim"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
