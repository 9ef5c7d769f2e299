"""
IPFS endpoints -- pin files and metadata, check and describe pinned content.

Without Pinata credentials these are simulated and return mock hashes.
"""

from fastapi import APIRouter, File, UploadFile

from medchain.ledger import ipfs
from medchain.models.schemas import IPFSAccessResponse, IPFSFetchResult, IPFSUploadResponse

router = APIRouter()


@router.post(
    "/v1/ipfs/files",
    response_model=IPFSUploadResponse,
    summary="Upload a file to IPFS",
    description="Maximum size 10MB. Returns 413 for larger files, 502 if Pinata rejects the pin.",
    tags=["IPFS"],
)
async def upload_file(file: UploadFile = File(...)) -> IPFSUploadResponse:
    content = await file.read()
    ipfs_hash = await ipfs.upload_to_ipfs(
        file.filename or "upload",
        content,
        file.content_type or "application/octet-stream",
    )
    return IPFSUploadResponse(ipfs_hash=ipfs_hash, url=ipfs.gateway_url(ipfs_hash))


@router.post(
    "/v1/ipfs/metadata",
    response_model=IPFSUploadResponse,
    summary="Upload JSON metadata to IPFS",
    tags=["IPFS"],
)
async def upload_metadata(metadata: dict) -> IPFSUploadResponse:
    ipfs_hash = await ipfs.upload_metadata_to_ipfs(metadata)
    return IPFSUploadResponse(ipfs_hash=ipfs_hash, url=ipfs.gateway_url(ipfs_hash))


@router.get(
    "/v1/ipfs/{ipfs_hash}/access",
    response_model=IPFSAccessResponse,
    summary="Check whether a hash is reachable on the gateway",
    tags=["IPFS"],
)
async def check_access(ipfs_hash: str) -> IPFSAccessResponse:
    accessible = await ipfs.check_ipfs_file_access(ipfs_hash)
    return IPFSAccessResponse(ipfs_hash=ipfs_hash, accessible=accessible, url=ipfs.gateway_url(ipfs_hash))


@router.get(
    "/v1/ipfs/{ipfs_hash}",
    response_model=IPFSFetchResult,
    summary="Describe pinned content",
    description="Always 200; check `success` for whether the content could be reached.",
    tags=["IPFS"],
)
async def fetch(ipfs_hash: str) -> IPFSFetchResult:
    return IPFSFetchResult(**await ipfs.fetch_from_ipfs(ipfs_hash))
