[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "plistnode"
version = "0.1.0"
description = "Property list node tree with binary plist reading and writing"
requires-python = ">=3.10"
dependencies = []
keywords = ["plist", "property list", "bplist", "binary plist", "tree", "base64"]
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
    "Topic :: File Formats",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
plistnode-tree = "plistnode.tree:main"

[tool.hatch.build.targets.wheel]
packages = ["plistnode"]

[tool.pytest.ini_options]
addopts = "-ra"
