[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gtmkit"
version = "0.1.0"
description = "Client, tools, prompts and resource URIs for Google Tag Manager containers, workspaces, tags, triggers and variables"
requires-python = ">=3.10"
dependencies = []
keywords = ["google-tag-manager", "gtm", "analytics", "ga4", "tags", "triggers"]
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
    "Topic :: Internet :: WWW/HTTP",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["gtmkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
