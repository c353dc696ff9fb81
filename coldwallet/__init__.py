"""Bitcoin wallet primitives: BIP32 indexes, derivation paths, base58, addresses, amounts and taproot trees."""

__version__ = "0.1.0"