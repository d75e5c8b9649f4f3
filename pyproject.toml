[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "auctionstate"
version = "0.1.0"
description = "Binary account layouts and state rules for an NFT auction manager"
requires-python = ">=3.10"
dependencies = []
keywords = ["auction", "nft", "account", "binary", "layout", "serialization"]
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

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["auctionstate"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
