import pytest

from lumina import MemoryStore


@pytest.fixture
def rfc8032_vector():
    """RFC 8032, section 7.1, TEST 1 (empty message)."""
    return {
        "seed": bytes.fromhex("9d61b19deffd5a60ba844af492ec2cc44449c5697b326919703bac031cae7f60"),
        "public": bytes.fromhex("d75a980182b10ab7d54bfed3c964073a0ee172f3daa62325af021a68f707511a"),
        "message": b"",
        "signature": bytes.fromhex(
            "e5564300c360ac729086e2cc806e828a84877f1eb8e5d974d873e065224901555"
            "fb8821590a33bacc61e39701cf9b46bd25bf5f0595bbe24655141438e7a100b"
        ),
    }


@pytest.fixture
def zero_seed():
    return bytes(32)


@pytest.fixture
def zero_seed_public_hex():
    return "3b6a27bcceb6a42d62a3a8d02a6f0d73653215771de243a63ac048a18b59da29"


@pytest.fixture
def seed():
    # 0x00, 0x01, ..., 0x1f
    return bytes(range(32))


@pytest.fixture
def memory_store():
    return MemoryStore()
