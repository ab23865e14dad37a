[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "actorkit"
version = "0.1.0"
description = "An asyncio actor framework with supervision trees, prioritised ports and lifecycle hooks"
requires-python = ">=3.10"
dependencies = []
keywords = ["actor", "asyncio", "supervision", "concurrency", "messaging"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Framework :: AsyncIO",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries :: Application Frameworks",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest", "pytest-asyncio"]

[project.scripts]
actorkit-ping-pong = "actorkit.ping_pong:main"
actorkit-monte-carlo = "actorkit.monte_carlo:main"

[tool.hatch.build.targets.wheel]
packages = ["actorkit"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
