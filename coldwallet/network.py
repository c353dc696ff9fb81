"""Bitcoin networks and the address networks they map to."""

from __future__ import annotations

import enum
import functools


@functools.total_ordering
class AddressNetwork(enum.Enum):
    """Network an address belongs to."""

    MAINNET = "mainnet"
    TESTNET = "testnet"
    REGTEST = "regtest"

    def is_testnet(self) -> bool:
        """Whether the network is a kind of test network."""
        return self is not AddressNetwork.MAINNET

    def bech32_hrp(self) -> str:
        """Human-readable part of Bech32 addresses on this network."""
        return _HRP[self]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, AddressNetwork):
            return NotImplemented
        members = list(AddressNetwork)
        return members.index(self) < members.index(other)


_HRP = {
    AddressNetwork.MAINNET: "bc",
    AddressNetwork.TESTNET: "tb",
    AddressNetwork.REGTEST: "bcrt",
}


class UnknownNetwork(ValueError):
    """A network name is not recognised."""

    def __init__(self, name: str) -> None:
        super().__init__(f"unknown bitcoin network '{name}'")
        self.name = name


@functools.total_ordering
class Network(enum.Enum):
    """Bitcoin network."""

    MAINNET = "bitcoin"
    TESTNET3 = "testnet3"
    SIGNET = "signet"
    REGTEST = "regtest"

    def is_testnet(self) -> bool:
        """Whether the network is a kind of test network."""
        return self is not Network.MAINNET

    def address_network(self) -> AddressNetwork:
        """Address network used on this network."""
        if self is Network.MAINNET:
            return AddressNetwork.MAINNET
        if self is Network.REGTEST:
            return AddressNetwork.REGTEST
        return AddressNetwork.TESTNET

    @classmethod
    def parse(cls, s: str) -> Network:
        """Network from its name or one of its aliases."""
        try:
            return _ALIASES[s]
        except KeyError:
            raise UnknownNetwork(s) from None

    def __str__(self) -> str:
        return self.value

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Network):
            return NotImplemented
        members = list(Network)
        return members.index(self) < members.index(other)


_ALIASES = {
    "bitcoin": Network.MAINNET,
    "mainnet": Network.MAINNET,
    "testnet": Network.TESTNET3,
    "testnet3": Network.TESTNET3,
    "signet": Network.SIGNET,
    "regtest": Network.REGTEST,
}