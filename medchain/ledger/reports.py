"""
Report-level operations on top of the NFT manager: issuing reports,
listing them per patient / doctor, search, status updates, export, and
keeping the in-memory list in step with the snapshot file.
"""

import logging
from datetime import datetime, timezone

from medchain import store
from medchain.ledger import ipfs
from medchain.ledger.latency import simulate_delay
from medchain.ledger.nft import NFTManager, PDFAttachment, ReportData
from medchain.ledger.roles import DEMO_DOCTOR_NAME, DOCTOR_WALLET
from medchain.notifications import (
    NFT_REPORT_CREATED,
    NFT_TRANSFERRED,
    REPORT_STATUS_UPDATED,
    REPORTS_CLEARED,
    NotificationService,
)

logger = logging.getLogger(__name__)

EXPORTED_BY = "MedChain Health Plus"
EXPORT_DISCLAIMER = "This is a blockchain-verified medical report NFT."


async def create_medical_report_nft_with_pdf(
    doctor_wallet: str,
    patient_wallet: str,
    report: ReportData,
    pdf: PDFAttachment | None = None,
) -> dict:
    """Mint a report and tell subscribers about it."""
    record = await NFTManager().create_medical_report_nft(doctor_wallet, patient_wallet, report, pdf)

    NotificationService.emit(NFT_REPORT_CREATED, {
        "patient_wallet": patient_wallet,
        "doctor_wallet": doctor_wallet,
        "report": record,
    })
    return record


async def create_medical_nft(
    report: dict,
    patient_wallet: str,
    doctor_wallet: str | None = None,
    pdf: PDFAttachment | None = None,
) -> dict:
    """Older entry point taking a loose report dict (title/description/diagnosis/treatment/date)."""
    data = ReportData(
        title=report["title"],
        content=report.get("description") or report.get("diagnosis") or "",
        date=report.get("date", ""),
        doctor_name=DEMO_DOCTOR_NAME,
        remarks=report.get("treatment") or "Medical report created",
    )
    return await create_medical_report_nft_with_pdf(
        doctor_wallet or DOCTOR_WALLET, patient_wallet, data, pdf,
    )


async def get_patient_medical_nfts(wallet_address: str) -> list[dict]:
    store.merge_snapshot()
    patient_reports = [r for r in store.nft_reports if r["patient_wallet"] == wallet_address]

    for report in patient_reports:
        if report.get("ipfs_hash"):
            report["file_accessible"] = await ipfs.check_ipfs_file_access(report["ipfs_hash"])

    await simulate_delay("patient_nfts")
    logger.info("Found %d medical NFT reports for patient %s", len(patient_reports), wallet_address)
    return patient_reports


async def get_all_reports_for_doctor(doctor_wallet: str) -> list[dict]:
    doctor_reports = [r for r in store.nft_reports if r["doctor_wallet"] == doctor_wallet]
    await simulate_delay("list")
    return doctor_reports


async def get_all_nft_reports() -> list[dict]:
    await simulate_delay("all_reports")
    return list(store.nft_reports)


def _matches(report: dict, term: str) -> bool:
    metadata = report.get("metadata", {})
    if term in str(metadata.get("name", "")).lower():
        return True
    if term in str(metadata.get("description", "")).lower():
        return True
    return any(term in str(attr.get("value", "")).lower() for attr in metadata.get("attributes", []))


async def search_nft_reports(query: str = "", wallet_address: str | None = None) -> list[dict]:
    """Case-insensitive search over report name, description and attribute values."""
    await simulate_delay("list")

    results = list(store.nft_reports)
    if wallet_address:
        results = [
            r for r in results
            if wallet_address in (r["patient_wallet"], r["doctor_wallet"])
        ]
    if query:
        term = query.lower()
        results = [r for r in results if _matches(r, term)]
    return results


async def get_report_by_id(report_id: str) -> dict | None:
    return next((r for r in store.nft_reports if r["id"] == report_id), None)


async def update_report_status(report_id: str, status: str) -> dict | None:
    report = await get_report_by_id(report_id)
    if report is None:
        return None

    report["status"] = status
    report["updated_at"] = datetime.now(timezone.utc).isoformat()
    store.save_snapshot()

    NotificationService.emit(REPORT_STATUS_UPDATED, {
        "report_id": report_id,
        "status": status,
        "patient_wallet": report["patient_wallet"],
        "doctor_wallet": report["doctor_wallet"],
        "report": report,
    })
    return report


async def transfer_report_nft(mint: str, patient_wallet: str | None = None) -> dict | None:
    """Transfer a report NFT to its patient (or to `patient_wallet` if given)."""
    manager = NFTManager()
    nft = manager.find_by_mint(mint)
    if nft is None:
        return None

    record = await manager.transfer_nft_to_patient(mint, patient_wallet or nft["patient_wallet"])

    NotificationService.emit(NFT_TRANSFERRED, {
        "mint": mint,
        "patient_wallet": record["current_owner"],
        "doctor_wallet": record["doctor_wallet"],
        "transfer_signature": record["transfer_signature"],
        "report": record,
    })
    return record


def export_report_data(report: dict) -> dict:
    metadata = report.get("metadata", {})
    return {
        "report_title": metadata.get("name"),
        "report_description": metadata.get("description"),
        "nft_mint": report["mint"],
        "owner": report["patient_wallet"],
        "created_at": report.get("created_at"),
        "attributes": metadata.get("attributes", []),
        "blockchain_verified": report.get("blockchain_confirmed", False),
        "explorer": report.get("explorer"),
        "exported_at": datetime.now(timezone.utc).isoformat(),
        "exported_by": EXPORTED_BY,
        "disclaimer": EXPORT_DISCLAIMER,
    }


def clear_all_reports() -> None:
    store.nft_reports.clear()
    store.delete_snapshot()
    NotificationService.emit(REPORTS_CLEARED, {})
    logger.info("All reports cleared")


def refresh_reports_from_storage() -> int:
    """Replace in-memory reports with the snapshot; re-seed if nothing is left."""
    store.nft_reports[:] = store.load_snapshot()
    if not store.nft_reports:
        store.nft_reports.extend(store.seed_reports())
    logger.info("Reports refreshed from storage: %d", len(store.nft_reports))
    return len(store.nft_reports)
