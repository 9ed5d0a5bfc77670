[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cdpkit"
version = "0.3.5"
description = "Client-side state for Chrome DevTools Protocol sessions: frames, navigations, network requests, targets, event listeners and layout helpers"
requires-python = ">=3.10"
dependencies = []
keywords = ["chrome", "chromium", "devtools", "cdp", "automation", "headless"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Internet :: WWW/HTTP :: Browsers",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest", "pytest-asyncio"]

[tool.hatch.build.targets.wheel]
packages = ["cdpkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
