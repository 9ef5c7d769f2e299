"""
Artificial latency for simulated blockchain / IPFS calls.

Every demo operation sleeps for a fixed time so the dashboard shows
realistic loading states. MEDCHAIN_LATENCY_SCALE multiplies all delays;
set it to 0 for tests.
"""

import asyncio
import os

LATENCY_SCALE = float(os.getenv("MEDCHAIN_LATENCY_SCALE", "1.0"))

# Seconds, per operation
DELAYS = {
    "file_upload": 2.0,
    "metadata_upload": 1.5,
    "mint": 3.0,
    "appointment_create": 1.5,
    "appointment_update": 1.0,
    "list": 0.5,
    "all_reports": 0.3,
    "patient_nfts": 0.8,
    "transfer": 2.0,
    "nft_transfer": 3.5,
    "chain_verify": 2.0,
    "airdrop": 1.0,
}


async def simulate_delay(operation: str) -> None:
    seconds = DELAYS[operation] * LATENCY_SCALE
    if seconds > 0:
        await asyncio.sleep(seconds)
