[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "marketsniper"
version = "0.1.0"
description = "Trading strategies for binary prediction markets: intra-market arbitrage, expiration sniping, spot-price prediction, position sizing, risk management and an in-memory market simulator"
requires-python = ">=3.10"
keywords = [
    "prediction-markets",
    "arbitrage",
    "trading",
    "kelly-criterion",
    "risk-management",
    "backtesting",
    "simulation",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Financial and Insurance Industry",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Framework :: AsyncIO",
    "Topic :: Office/Business :: Financial :: Investment",
]
dependencies = [
    "httpx",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
    "respx",
]

[tool.hatch.build.targets.wheel]
packages = ["marketsniper"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
