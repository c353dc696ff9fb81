import pytest

from coldwallet.network import AddressNetwork, Network, UnknownNetwork


@pytest.mark.parametrize(
    "name, network",
    [
        ("bitcoin", Network.MAINNET),
        ("mainnet", Network.MAINNET),
        ("testnet", Network.TESTNET3),
        ("testnet3", Network.TESTNET3),
        ("signet", Network.SIGNET),
        ("regtest", Network.REGTEST),
    ],
)
def test_parse(name, network):
    assert Network.parse(name) is network


@pytest.mark.parametrize("network", list(Network))
def test_display_round_trip(network):
    assert Network.parse(str(network)) is network


def test_mainnet_displays_as_bitcoin():
    assert str(Network.parse("mainnet")) == "bitcoin"


def test_unknown_network():
    with pytest.raises(UnknownNetwork) as info:
        Network.parse("Mainnet")
    assert info.value.name == "Mainnet"
    assert str(info.value) == "unknown bitcoin network 'Mainnet'"


@pytest.mark.parametrize(
    "name, expected",
    [("bitcoin", False), ("testnet", True), ("signet", True), ("regtest", True)],
)
def test_is_testnet(name, expected):
    network = Network.parse(name)
    assert network.is_testnet() is expected
    assert network.address_network().is_testnet() is expected


@pytest.mark.parametrize(
    "network, address_network",
    [
        (Network.MAINNET, AddressNetwork.MAINNET),
        (Network.TESTNET3, AddressNetwork.TESTNET),
        (Network.SIGNET, AddressNetwork.TESTNET),
        (Network.REGTEST, AddressNetwork.REGTEST),
    ],
)
def test_address_network(network, address_network):
    assert network.address_network() is address_network
    assert network.is_testnet() == address_network.is_testnet()


@pytest.mark.parametrize(
    "network, hrp",
    [
        (AddressNetwork.MAINNET, "bc"),
        (AddressNetwork.TESTNET, "tb"),
        (AddressNetwork.REGTEST, "bcrt"),
    ],
)
def test_bech32_hrp(network, hrp):
    assert network.bech32_hrp() == hrp


def test_ordering_follows_declaration():
    regtest = Network.parse("regtest")
    mainnet = Network.parse("bitcoin")
    assert sorted([regtest.address_network(), mainnet.address_network()]) == [
        AddressNetwork.MAINNET,
        AddressNetwork.REGTEST,
    ]
    assert sorted([mainnet, regtest, Network.parse("signet")]) == [
        Network.MAINNET,
        Network.SIGNET,
        Network.REGTEST,
    ]