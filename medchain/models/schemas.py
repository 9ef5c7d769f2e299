"""
MedChain Records API -- Pydantic Data Models

Every request and response body is defined here. The Field() descriptions
and examples show up in the interactive docs at /docs.

Records are stored as plain dicts (see medchain.store); routes validate
them into these models on the way out.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class UserRole(str, Enum):
    """Which dashboard a wallet gets."""

    patient = "patient"
    doctor = "doctor"


class AppointmentStatus(str, Enum):
    pending = "pending"
    confirmed = "confirmed"
    rejected = "rejected"


# ---------------------------------------------------------------------------
# Wallets
# ---------------------------------------------------------------------------

class DemoWallet(BaseModel):
    name: str = Field(examples=["Dr. WAHEGURU Singh"])
    address: str = Field(examples=["Memo1UhkJRfHyvLMcVucJwxXeuD728EqVDDwQDxFMNo"])
    role: UserRole
    description: str


class RoleResponse(BaseModel):
    address: str
    role: UserRole = Field(description="Dashboard role resolved from the wallet address.")


class BalanceResponse(BaseModel):
    address: str
    balance_sol: float = Field(
        description="Wallet balance in SOL. Always 0.0 when no RPC endpoint is configured.",
        examples=[1.5],
    )
    network: str = Field(examples=["devnet"])


class AirdropRequest(BaseModel):
    amount: float = Field(default=1, gt=0, le=5, description="SOL to request.", examples=[1])


class TransferRequest(BaseModel):
    from_wallet: str
    to_wallet: str
    amount: float = Field(gt=0, description="SOL to transfer.", examples=[0.25])


class SignatureResponse(BaseModel):
    """A (simulated) transaction signature plus its explorer link."""

    signature: str = Field(description="88-character base58 transaction signature.")
    explorer: str = Field(examples=["https://explorer.solana.com/tx/5Vf...?cluster=devnet"])


class TransactionDetails(BaseModel):
    signature: str
    slot: int
    block_time: int = Field(description="Unix timestamp (seconds).")
    confirmation_status: str = Field(examples=["confirmed"])
    fee: int = Field(description="Fee in lamports.", examples=[5000])
    status: str = Field(examples=["success"])
    explorer: str


# ---------------------------------------------------------------------------
# IPFS
# ---------------------------------------------------------------------------

class IPFSUploadResponse(BaseModel):
    ipfs_hash: str = Field(examples=["QmMedChainMock1733000000000abc123def456ghi"])
    url: str = Field(description="Pinata gateway URL for the pinned content.")


class IPFSAccessResponse(BaseModel):
    ipfs_hash: str
    accessible: bool
    url: str


class IPFSFetchResult(BaseModel):
    """Descriptor for pinned content. Failures come back with success=False, not an HTTP error."""

    success: bool
    hash: str
    url: str
    gateway: str = "Pinata"
    accessible: bool
    downloadable: bool
    data: str | None = None
    content_type: str | None = None
    error: str | None = None


# ---------------------------------------------------------------------------
# Reports (NFTs)
# ---------------------------------------------------------------------------

class NFTAttribute(BaseModel):
    trait_type: str = Field(examples=["Doctor"])
    value: Any = Field(examples=["Dr. WAHEGURU Singh"])


class NFTMetadata(BaseModel):
    """Metaplex-style token metadata."""

    name: str = Field(examples=["Blood Test Results"])
    symbol: str | None = Field(default=None, examples=["MEDNFT"])
    description: str = ""
    image: str | None = None
    external_url: str | None = None
    animation_url: str | None = None
    attributes: list[NFTAttribute] = []
    properties: dict | None = None
    collection: dict | None = None
    uri: str | None = Field(default=None, description="Gateway URL of the pinned metadata JSON.")


class MedicalReport(BaseModel):
    """A medical report minted as an NFT and owned by the patient's wallet."""

    id: str = Field(examples=["nft_1733000000000"])
    mint: str = Field(description="44-character base58 mint address.")
    patient_wallet: str
    doctor_wallet: str
    metadata: NFTMetadata
    ipfs_hash: str | None = Field(default=None, description="IPFS hash of the attached PDF, if any.")
    metadata_hash: str | None = None
    metadata_uri: str | None = None
    status: str = Field(examples=["minted"])
    transaction_signature: str | None = None
    created_at: datetime
    updated_at: datetime | None = None
    blockchain_confirmed: bool = False
    network: str | None = None
    explorer: str | None = None
    pinata_url: str = ""
    gateway: str = "Pinata"
    file_accessible: bool = False
    download_url: str = ""
    transferred_at: datetime | None = None
    transfer_signature: str | None = None
    current_owner: str | None = Field(default=None, description="Wallet the NFT was transferred to.")
    transfer_explorer: str | None = None


class NFTDetails(MedicalReport):
    on_chain: bool = Field(description="Always False: reports are never written to the chain.")
    verified: bool
    last_updated: datetime


class ChainVerification(BaseModel):
    verified: bool
    mint: str
    blockchain: str = Field(examples=["Solana Devnet"])
    status: Literal["confirmed", "not_found"]
    block_height: int
    timestamp: datetime
    explorer: str


class NFTVerifyResponse(BaseModel):
    authentic: bool = Field(description="True if the mint exists and is blockchain-confirmed.")
    chain: ChainVerification


class LegacyReport(BaseModel):
    title: str
    description: str | None = None
    diagnosis: str | None = None
    treatment: str | None = None
    date: str = ""


class LegacyReportRequest(BaseModel):
    """Body for the compatibility mint endpoint."""

    report: LegacyReport
    patient_wallet: str
    doctor_wallet: str | None = Field(
        default=None,
        description="Defaults to the demo doctor wallet.",
    )


class NFTTransferRequest(BaseModel):
    patient_wallet: str | None = Field(
        default=None,
        description="Recipient wallet. Defaults to the report's patient.",
    )


class ReportStatusUpdate(BaseModel):
    status: str = Field(examples=["reviewed"])


class ReportExport(BaseModel):
    report_title: str | None
    report_description: str | None
    nft_mint: str
    owner: str
    created_at: str | None
    attributes: list[NFTAttribute]
    blockchain_verified: bool
    explorer: str | None
    exported_at: datetime
    exported_by: str
    disclaimer: str


class RefreshResponse(BaseModel):
    reports_loaded: int


# ---------------------------------------------------------------------------
# Appointments & patients
# ---------------------------------------------------------------------------

class AppointmentRequest(BaseModel):
    doctor_wallet: str
    patient_wallet: str
    date: str = Field(examples=["2024-12-20"])
    time: str = Field(examples=["10:00 AM"])
    type: str = Field(examples=["Consultation"])
    notes: str = ""


class RejectRequest(BaseModel):
    reason: str | None = Field(default=None, examples=["Doctor unavailable"])


class Appointment(BaseModel):
    id: str = Field(examples=["apt_1733000000000"])
    doctor_wallet: str
    patient_wallet: str
    patient_name: str
    date: str
    time: str
    type: str
    notes: str = ""
    status: AppointmentStatus
    created_at: datetime
    approved_at: datetime | None = None
    rejected_at: datetime | None = None
    rejection_reason: str | None = None


class Patient(BaseModel):
    id: int
    name: str
    wallet: str
    age: int
    condition: str
    phone: str
    email: str
    avatar: str


# ---------------------------------------------------------------------------
# Notifications & dashboards
# ---------------------------------------------------------------------------

class NotificationEvent(BaseModel):
    id: int
    event: str = Field(examples=["nft_report_created"])
    data: dict
    timestamp: datetime


class DoctorDashboard(BaseModel):
    doctor_wallet: str
    total_patients: int
    total_reports: int
    pending_appointments: int
    confirmed_appointments: int
    todays_appointments: list[Appointment]
    recent_reports: list[MedicalReport] = Field(description="Up to 5, newest first.")


class PatientDashboard(BaseModel):
    patient_wallet: str
    profile: Patient | None
    report_count: int
    upcoming_appointments: list[Appointment] = Field(
        description="Pending or confirmed appointments.",
    )
    latest_report: MedicalReport | None
