"""
Solana simulation helpers.

No transactions are built or signed. Signatures and mint addresses are
random base58 strings of the right length so explorer links look real.

Balance and airdrop calls go to a Solana JSON-RPC endpoint only when
SOLANA_RPC_URL is set. Otherwise they run in demo mode: balances read
as 0 and airdrops return a simulated signature.
"""

import logging
import os
import random
import time
from datetime import datetime, timezone

import httpx

from medchain.errors import AirdropError
from medchain.ledger.latency import simulate_delay

logger = logging.getLogger(__name__)

SOLANA_NETWORK = os.getenv("SOLANA_NETWORK", "devnet")
SOLANA_RPC_URL = os.getenv("SOLANA_RPC_URL", "")

LAMPORTS_PER_SOL = 1_000_000_000

# base58 alphabet: no 0, O, I, l
BASE58_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"

SIGNATURE_LENGTH = 88
MINT_ADDRESS_LENGTH = 44


def _random_base58(length: int) -> str:
    return "".join(random.choices(BASE58_ALPHABET, k=length))


def generate_signature() -> str:
    return _random_base58(SIGNATURE_LENGTH)


def generate_mint_address() -> str:
    return _random_base58(MINT_ADDRESS_LENGTH)


def explorer_url(signature: str) -> str:
    return f"https://explorer.solana.com/tx/{signature}?cluster={SOLANA_NETWORK}"


def explorer_address_url(address: str) -> str:
    return f"https://explorer.solana.com/address/{address}?cluster={SOLANA_NETWORK}"


async def _rpc(method: str, params: list) -> dict:
    payload = {"jsonrpc": "2.0", "id": 1, "method": method, "params": params}
    async with httpx.AsyncClient(timeout=30.0) as client:
        resp = await client.post(SOLANA_RPC_URL, json=payload)
        resp.raise_for_status()
    data = resp.json()
    if "error" in data:
        raise RuntimeError(data["error"].get("message", str(data["error"])))
    return data


async def get_wallet_balance(wallet_address: str) -> float:
    """Balance in SOL, or 0.0 when it can't be determined."""
    if not SOLANA_RPC_URL:
        return 0.0
    try:
        data = await _rpc("getBalance", [wallet_address])
        return data["result"]["value"] / LAMPORTS_PER_SOL
    except Exception as e:
        logger.error("Error getting balance for %s: %s", wallet_address, e)
        return 0.0


async def request_devnet_airdrop(wallet_address: str, amount: float = 1) -> str:
    """Request test SOL. Returns the airdrop transaction signature."""
    if not SOLANA_RPC_URL:
        await simulate_delay("airdrop")
        signature = generate_signature()
        logger.info("Simulated airdrop of %s SOL to %s: %s", amount, wallet_address, signature)
        return signature

    try:
        data = await _rpc("requestAirdrop", [wallet_address, int(amount * LAMPORTS_PER_SOL)])
    except Exception as e:
        logger.error("Airdrop failed for %s: %s", wallet_address, e)
        message = str(e)
        if "429" in message or "airdrop limit" in message.lower():
            raise AirdropError(
                "Airdrop limit reached. Please visit faucet.solana.com for more test SOL.",
                status_code=429,
            ) from e
        raise AirdropError("Airdrop failed. Please check the server logs for details.") from e

    return data["result"]


async def transfer_sol(from_wallet: str, to_wallet: str, amount: float) -> str:
    logger.info("Transferring %s SOL: %s -> %s", amount, from_wallet, to_wallet)
    await simulate_delay("transfer")
    signature = generate_signature()
    logger.info("SOL transfer completed: %s", signature)
    return signature


async def get_transaction_details(signature: str) -> dict:
    await simulate_delay("list")
    return {
        "signature": signature,
        "slot": random.randrange(100_000, 1_100_000),
        "block_time": int(time.time()),
        "confirmation_status": "confirmed",
        "fee": 5000,  # lamports
        "status": "success",
        "explorer": explorer_url(signature),
    }


async def verify_nft_on_blockchain(mint: str, found: bool) -> dict:
    """Simulated chain lookup for a mint address.

    `found` is whether the mint exists in the report store; the chain
    itself is never queried.
    """
    logger.info("Verifying NFT on Solana %s: %s", SOLANA_NETWORK, mint)
    await simulate_delay("chain_verify")
    return {
        "verified": found,
        "mint": mint,
        "blockchain": f"Solana {SOLANA_NETWORK.capitalize()}",
        "status": "confirmed" if found else "not_found",
        "block_height": random.randrange(200_000_000, 201_000_000),
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "explorer": explorer_address_url(mint),
    }
