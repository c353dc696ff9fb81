# coldwallet

Building blocks for a watch-only Bitcoin wallet, in pure Python with no
third-party dependencies.

## Modules

- `coldwallet.index`: BIP32 child indexes `NormalIndex`, `HardenedIndex` and
  `DerivationIndex`, with checked, saturating and wrapping arithmetic
  (`checked_add`, `saturating_sub`, `wrapping_inc`, ...), parsing and
  `to_be_bytes`. Range problems raise `IndexRangeError`, bad strings raise
  `IndexParseError`.
- `coldwallet.path`: `DerivationPath` (a list of indexes) and `DerivationSeg`,
  a set of one to eight alternative indexes such as `<0;1>`.
  `DerivationPath.terminal()` returns the trailing keychain/index pair when
  both are unhardened.
- `coldwallet.terminal`: `Keychain`, `Terminal` (written `&<keychain>/<index>`),
  `DerivedAddr` (an address followed by its terminal) and the abstract base
  class `Derive`, whose `derive_batch` derives at consecutive indexes.
- `coldwallet.base58`: `encode`, `decode`, `encode_check` and `decode_check`;
  failures raise `Base58Error`.
- `coldwallet.network`: `Network` (bitcoin, testnet3, signet, regtest, parsed
  with `Network.parse`) and `AddressNetwork` (mainnet, testnet, regtest).
- `coldwallet.amount`: `Sats`, an amount in satoshis, with BTC formatting.
- `coldwallet.address`: `Address` and `AddressPayload` for P2PKH, P2SH, P2WPKH,
  P2WSH and P2TR: parsing Base58 and Bech32/Bech32m strings, printing them back,
  and converting to and from scriptPubkey bytes.
- `coldwallet.taptree`: taproot script trees (`LeafInfo`, `TapTreeBuilder`,
  `TapTree`) with the BIP341 Merkle root, and `tap_leaf_hash`.

## Installation

```
pip install .
```

## Examples

Derivation paths accept `h`, `H` and `'` for hardened indexes:

```python
from coldwallet.index import HardenedIndex
from coldwallet.path import DerivationPath

path = DerivationPath.parse("86h/1h/0h", HardenedIndex)
assert path == DerivationPath.parse("86'/1'/0'", HardenedIndex)
print(path)  # /86h/1h/0h
```

Index arithmetic stays within BIP32 limits:

```python
from coldwallet.index import NormalIndex

idx = NormalIndex.try_from_child_number(10)
print(idx.checked_add(5))              # 15
print(NormalIndex.MAX.checked_inc())   # None
print(NormalIndex.parse("7"))          # 7
```

Addresses parse and print back unchanged:

```python
from coldwallet.address import Address

text = "tb1p5kgdjdf99vfa2xwufd2cx2qru468z79s2arn3jf5feg95d9m62gqzpnjjk"
addr = Address.parse(text)
assert str(addr) == text
print(addr.is_testnet())  # True
```

Base58check:

```python
from coldwallet import base58

encoded = base58.encode_check(b"\x00" + bytes(20))
assert base58.decode_check(encoded) == b"\x00" + bytes(20)
```

Amounts:

```python
from coldwallet.amount import Sats

print(Sats(1000))                     # 1000
print(format(Sats(1000), ".8"))       # 0.00001000
print(format(Sats.from_btc(1), ".8")) # 1.00000000
```

Terminal paths:

```python
from coldwallet.terminal import Terminal

terminal = Terminal.parse("&1/42")
print(terminal)  # &1/42
```

## What it does not do

The package holds no private or extended keys and does no elliptic-curve key
derivation: `Derive` is an abstract base class, and producing keys or scripts
from an extended public key is left to the class that implements it. There are
no output descriptors, no transaction or PSBT handling, no storage and no
command-line tool.

## Running the tests

```
pip install .[test]
pytest
```