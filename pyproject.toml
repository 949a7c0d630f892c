[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ucdmongo"
version = "0.1.0"
description = "Load the Unicode Character Database (UCD XML) into MongoDB"
requires-python = ">=3.10"
keywords = ["unicode", "ucd", "mongodb", "xml", "character database"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database",
    "Topic :: Text Processing",
]
dependencies = [
    "pymongo",
    "python-dotenv",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
ucdmongo = "ucdmongo.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["ucdmongo"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
