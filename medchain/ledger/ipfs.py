"""
IPFS storage via Pinata (demo mode by default).

When PINATA_API_KEY and PINATA_SECRET_KEY are set in the environment,
files and JSON metadata are pinned through the Pinata REST API. Without
them every call is simulated: we sleep for a realistic upload time and
return a placeholder hash that the rest of the system recognises as a
mock (it contains "Mock" or "MedChain").

Credentials are only ever read from the environment.
"""

import json
import logging
import os
import random
import string
import time
from datetime import datetime, timezone

import httpx

from medchain.errors import FileTooLargeError, IPFSUploadError
from medchain.ledger.latency import simulate_delay

logger = logging.getLogger(__name__)

PINATA_API_KEY = os.getenv("PINATA_API_KEY", "")
PINATA_SECRET_KEY = os.getenv("PINATA_SECRET_KEY", "")
PINATA_API_URL = os.getenv("PINATA_API_URL", "https://api.pinata.cloud")
PINATA_GATEWAY = os.getenv("PINATA_GATEWAY", "https://gateway.pinata.cloud/ipfs/")

MAX_FILE_SIZE = 10 * 1024 * 1024  # 10 MiB

_BASE36 = string.digits + string.ascii_lowercase

# Anything carrying these markers was produced by the simulator
MOCK_MARKERS = ("Mock", "MedChain")


def pinata_configured() -> bool:
    return bool(PINATA_API_KEY and PINATA_SECRET_KEY)


def gateway_url(ipfs_hash: str) -> str:
    return f"{PINATA_GATEWAY}{ipfs_hash}"


def is_mock_hash(ipfs_hash: str) -> bool:
    return any(marker in ipfs_hash for marker in MOCK_MARKERS)


def _mock_hash(prefix: str) -> str:
    suffix = "".join(random.choices(_BASE36, k=15))
    return f"{prefix}{int(time.time() * 1000)}{suffix}"


def _auth_headers() -> dict[str, str]:
    return {
        "pinata_api_key": PINATA_API_KEY,
        "pinata_secret_api_key": PINATA_SECRET_KEY,
    }


async def upload_to_ipfs(
    filename: str,
    content: bytes,
    content_type: str = "application/octet-stream",
) -> str:
    """Pin a file and return its IPFS hash."""
    logger.info("Uploading file to IPFS: %s (%d bytes)", filename, len(content))

    if len(content) > MAX_FILE_SIZE:
        raise FileTooLargeError("File too large. Maximum size is 10MB.")

    if not pinata_configured():
        await simulate_delay("file_upload")
        ipfs_hash = _mock_hash("QmMedChainMock")
        logger.info("Pinata keys not configured, mock file uploaded: %s", ipfs_hash)
        return ipfs_hash

    pinata_metadata = {
        "name": f"MedChain-Medical-{filename}",
        "keyvalues": {
            "type": "medical_report",
            "uploaded_by": "MedChain_Health_System",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    }

    async with httpx.AsyncClient(timeout=60.0) as client:
        resp = await client.post(
            f"{PINATA_API_URL}/pinning/pinFileToIPFS",
            headers=_auth_headers(),
            files={"file": (filename, content, content_type)},
            data={"pinataMetadata": json.dumps(pinata_metadata)},
        )

    if resp.status_code >= 400:
        logger.error("Pinata upload error %d: %s", resp.status_code, resp.text)
        raise IPFSUploadError(f"Failed to upload file to IPFS: {resp.text}", body=resp.text)

    ipfs_hash = resp.json()["IpfsHash"]
    logger.info("File pinned: %s", gateway_url(ipfs_hash))
    return ipfs_hash


async def upload_metadata_to_ipfs(metadata: dict) -> str:
    """Pin a JSON document (NFT metadata) and return its IPFS hash."""
    logger.info("Uploading metadata to IPFS")

    if not pinata_configured():
        await simulate_delay("metadata_upload")
        ipfs_hash = _mock_hash("QmMedChainMetaMock")
        logger.info("Pinata keys not configured, mock metadata uploaded: %s", ipfs_hash)
        return ipfs_hash

    body = {
        "pinataContent": metadata,
        "pinataMetadata": {
            "name": f"MedChain-Medical-Metadata-{int(time.time() * 1000)}",
            "keyvalues": {
                "type": "nft_metadata",
                "created_by": "MedChain_Health_System",
                "timestamp": datetime.now(timezone.utc).isoformat(),
            },
        },
    }

    async with httpx.AsyncClient(timeout=30.0) as client:
        resp = await client.post(
            f"{PINATA_API_URL}/pinning/pinJSONToIPFS",
            headers=_auth_headers(),
            json=body,
        )

    if resp.status_code >= 400:
        logger.error("Pinata metadata upload error %d: %s", resp.status_code, resp.text)
        raise IPFSUploadError(f"Failed to pin JSON to IPFS: {resp.text}", body=resp.text)

    ipfs_hash = resp.json()["IpfsHash"]
    logger.info("Metadata pinned: %s", gateway_url(ipfs_hash))
    return ipfs_hash


async def check_ipfs_file_access(ipfs_hash: str) -> bool:
    """True if the gateway serves the hash.

    Mock hashes count as accessible whenever the gateway can't be reached,
    and demo mode never touches the network at all.
    """
    if not pinata_configured():
        return is_mock_hash(ipfs_hash)

    try:
        async with httpx.AsyncClient(timeout=10.0) as client:
            resp = await client.head(gateway_url(ipfs_hash))
        accessible = resp.is_success
        logger.info("IPFS access check %s: %s", ipfs_hash, "ACCESSIBLE" if accessible else "NOT ACCESSIBLE")
        return accessible
    except httpx.HTTPError as e:
        logger.warning("Gateway unreachable for %s (%s), applying mock-hash rule", ipfs_hash, e)
        return is_mock_hash(ipfs_hash)


def _fetch_failure(ipfs_hash: str, error: str) -> dict:
    return {
        "success": False,
        "error": error,
        "url": gateway_url(ipfs_hash),
        "hash": ipfs_hash,
        "gateway": "Pinata",
        "accessible": False,
        "downloadable": False,
    }


async def fetch_from_ipfs(ipfs_hash: str) -> dict:
    """Describe a pinned file. Never raises; failures come back as a dict."""
    url = gateway_url(ipfs_hash)

    if not await check_ipfs_file_access(ipfs_hash):
        return _fetch_failure(ipfs_hash, "File not accessible on IPFS")

    result = {
        "success": True,
        "data": "Medical report content from Pinata IPFS",
        "url": url,
        "hash": ipfs_hash,
        "gateway": "Pinata",
        "accessible": True,
        "downloadable": True,
        "content_type": "application/pdf",
    }

    if not pinata_configured():
        return result

    try:
        async with httpx.AsyncClient(timeout=15.0) as client:
            resp = await client.get(url)
        resp.raise_for_status()
    except httpx.HTTPError as e:
        logger.error("Error fetching %s from Pinata: %s", ipfs_hash, e)
        return _fetch_failure(ipfs_hash, str(e))

    result["content_type"] = resp.headers.get("content-type", "application/octet-stream")
    return result
