"""Deployment blocks of known vaults.

Event scans for a vault start at its deployment block. A vault missing from
the table is scanned from the earliest registered block of its chain, which
predates every vault created by the chain's factory.
"""

import logging

from lendwatch.domain.models.enums import SupportedChain

logger = logging.getLogger(__name__)

LENDING_VAULT_START_BLOCKS: dict[SupportedChain, dict[str, int]] = {
    SupportedChain.ETHEREUM: {
        "0x8cf1DE26729cfB7137AF1A6B2a665e099EC319b5": 19422666,
        "0x5AE28c9197a4a6570216fC7e53E7e0221D7A0FEF": 19422678,
        "0xb2b23C87a4B6d1b03Ba603F7C3EB9A81fDC0AAC9": 19422684,
        "0xCeA18a8752bb7e7817F9AE7565328FE415C0f2cA": 19422691,
        "0x4D2f44B0369f3C20c3d670D2C26b048985598450": 19422706,
        "0x46196C004de85c7a75C8b1bB9d54Afb0f8654A45": 19468672,
        "0x99Cff9Dc26A44dc2496B4448ebE415b5E894bd30": 19468701,
        "0x52096539ed1391CB50C6b9e4Fd18aFd2438ED23b": 19481927,
        "0x7586C58bf6292B3C9DeFC8333fc757d6c5dA0f7E": 19707458,
        "0xccd37EB6374Ae5b1f0b85ac97eFf14770e0D0063": 19800634,
        "0xff467c6E827ebbEa64DA1ab0425021E6c89Fbe0d": 19801071,
        "0x4a7999c55d3a93dAf72EA112985e57c2E3b9e95D": 19999153,
        "0x8fb1c7AEDcbBc1222325C39dd5c1D2d23420CAe3": 20034869,
        "0x21CF1c5Dc48C603b89907FE6a7AE83EA5e3709aF": 20035301,
        "0xc687141c18F20f7Ba405e45328825579fDdD3195": 20148558,
        "0xd0c183C9339e73D7c9146D48E1111d1FBEe2D6f9": 20157147,
        "0x839020cf9528f24c303e7789455D94534CbdCbC1": 20249759,
        "0x14361C243174794E2207296a6AD59bb0Dec1d388": 20325474,
        "0xECd491fc3D97e3b7be01E4175ECE7F91829AAef8": 20340672,
        "0xA508Bb33E9EBCd3f505059154Ceb4F9b446b76b3": 20420349,
        "0x0111646E459e0BBa57daCA438262f3A092ae24C6": 20420974,
        "0x7F6F1E23F6479477D045e2E61F0169f6Eb561003": 20629979,
        "0xC6F7E164ed085b68d5DF20d264f70410CB0B7458": 20899272,
        "0x52036c9046247C3358c987A2389FFDe6Ef8564c9": 20925172,
        "0x2707FeB6C0F9bf53b7e0c108d50b15fD7B32701f": 20941819,
        "0x88BDDB9293F3EFa2ceA349E184c656Ae0817aC87": 21030792,
        "0xc9cCB6E3Cc9D1766965278Bd1e7cc4e58549D1F8": 21031049,
    },
    SupportedChain.ARBITRUM: {
        "0x49014A8eB1585cBee6A7a9A50C3b81017BF6Cc4d": 193652607,
        "0x60D38b12d22BF423F28082bf396ff8F28cC506B1": 193652708,
        "0xB50409Dd4D5B418042ab4DCee6a2FA7D1FE2fcf8": 195190204,
        "0x7d622A3615B34abf84Ac255b8C8D1685ea3a433F": 195721892,
        "0xeEaF2ccB73A01deb38Eca2947d963D64CfDe6A32": 196070126,
        "0x65592b1F12c07D434e95c7BF87F4f2f464e950e4": 196070155,
        "0xb56369a6519F84C6fD92644D421273618B8d62B0": 198287645,
        "0xebA51f6472F4cE1C47668c2474ab8f84B32E1ae7": 198472455,
        "0x2415747A063B55bFeb65e22f9a95a83e0151e4F8": 199919802,
        "0xd3cA9BEc3e681b0f578FD87f20eBCf2B7e0bb739": 219516379,
        "0xe07f1151887b8FDC6800f737252f6b91b46b5865": 219516420,
        "0xa6C2E6A83D594e862cDB349396856f7FFE9a979B": 219516457,
        "0x9D3F07f173E5ae7b7a789ac870D23669Af218e89": 219516500,
        "0xC8248953429d707C6A2815653ECa89846Ffaa63b": 230535746,
        "0xd595E5EFbd887107a6Cc646b76f084f55AfDA2ac": 244549364,
        "0xe296eE7F83D1d95B3f7827fF1D08Fe1E4cF09d8d": 244552387,
        "0x2dA79346E3f5d28aAd323096aBe4dA79C5140916": 255155893,
        "0x0E6Ad128D7E217439bEEa90695FE7ec859c7F98C": 256880630,
        "0x13E7Bd499447318E3B7a312fD6369d8E562e15E8": 268471020,
        "0x744DE5297Ab6e4846c55Ba57D99cee1C3408bB80": 268471535,
        "0x6CFEa3B86ea254C0e4C8c2276aB9e93F58CDB597": 268473102,
    },
}

# scrvUSD on Ethereum
SAVINGS_VAULT_ADDRESS = "0x0655977FEb2f289A4aB78af67BAB0d17aAb84367"
SAVINGS_VAULT_CHAIN = SupportedChain.ETHEREUM
SAVINGS_VAULT_START_BLOCK = 21087889

_START_BLOCKS_BY_ADDRESS: dict[SupportedChain, dict[str, int]] = {
    chain: {address.lower(): block for address, block in blocks.items()}
    for chain, blocks in LENDING_VAULT_START_BLOCKS.items()
}
_START_BLOCKS_BY_ADDRESS[SAVINGS_VAULT_CHAIN][SAVINGS_VAULT_ADDRESS.lower()] = SAVINGS_VAULT_START_BLOCK


def earliest_start_block(chain: SupportedChain) -> int:
    """Return the lowest registered deployment block on a chain."""
    return min(_START_BLOCKS_BY_ADDRESS[chain].values())


def vault_start_block(chain: SupportedChain, vault_address: str) -> int:
    """Return the block to start scanning a vault's events from."""
    chain = SupportedChain(chain)
    block = _START_BLOCKS_BY_ADDRESS[chain].get(vault_address.lower())
    if block is not None:
        return block
    fallback = earliest_start_block(chain)
    logger.warning(
        "Vault %s on %s has no registered deployment block; scanning from block %d",
        vault_address,
        chain.value,
        fallback,
    )
    return fallback
