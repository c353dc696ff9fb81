[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "coldwallet"
version = "0.1.0"
description = "Bitcoin wallet primitives: BIP32 indexes and derivation paths, base58, addresses, amounts and taproot trees"
requires-python = ">=3.10"
dependencies = []
keywords = ["bitcoin", "wallet", "bip32", "base58", "bech32", "taproot", "address"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Office/Business :: Financial",
    "Topic :: Security :: Cryptography",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["coldwallet"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
