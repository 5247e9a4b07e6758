"""
Predict CREATE2 addresses https://eips.ethereum.org/EIPS/eip-1014
"""
from eth_utils import decode_hex, encode_hex, keccak, to_checksum_address

ZERO_SALT = "00" * 32


def compute_create2_address(deployer: str, initcode: str, salt: str = ZERO_SALT) -> str:
    """Return the address CREATE2 gives to initcode deployed by deployer

    Args:
        deployer (str): address of the creating contract
        initcode (str): hex initcode (fully linked)
        salt (str): 32 bytes hex salt, zero by default

    Raises:
        ValueError: If the deployer or the salt have the wrong size

    Returns:
        str: checksummed address
    """
    deployer_bytes = decode_hex(deployer)
    salt_bytes = decode_hex(salt)
    if len(deployer_bytes) != 20:
        raise ValueError(f"{deployer} is not a 20 bytes address")
    if len(salt_bytes) != 32:
        raise ValueError(f"{salt} is not a 32 bytes salt")
    digest = keccak(b"\xff" + deployer_bytes + salt_bytes + keccak(decode_hex(initcode)))
    return to_checksum_address(encode_hex(digest[12:]))
