"""
Medical report NFTs (simulated mint).

HOW A REPORT IS MINTED:
  1. Upload the PDF (if any) to IPFS
  2. Look up the patient's name
  3. Build Metaplex-style NFT metadata (name, symbol, attributes, files)
  4. Upload the metadata JSON to IPFS
  5. "Mint": wait, then generate a transaction signature and mint address
  6. Append the report record to the store and return it

Nothing reaches the chain. The record still carries a plausible explorer
link and is marked blockchain_confirmed so the dashboards can show it.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from medchain import store
from medchain.errors import MedChainError, NFTMintError
from medchain.ledger import ipfs, solana
from medchain.ledger.latency import simulate_delay
from medchain.ledger.patients import patient_name_for

logger = logging.getLogger(__name__)

NFT_SYMBOL = "MEDNFT"
NFT_IMAGE = "https://i.imgur.com/mN4D32Z.png"
SYSTEM_NAME = "MedChain Health System"
COLLECTION = {"name": "MedChain Medical Reports", "family": "Medical NFTs"}


@dataclass
class ReportData:
    """What the doctor fills in when issuing a report."""

    title: str
    content: str
    date: str
    doctor_name: str
    remarks: str = ""


@dataclass
class PDFAttachment:
    filename: str
    content: bytes
    content_type: str = "application/pdf"


def build_metadata(
    report: ReportData,
    doctor_wallet: str,
    patient_wallet: str,
    patient_name: str,
    pdf_hash: str | None,
    pdf_url: str | None,
    pdf_content_type: str | None = None,
) -> dict:
    attributes = [
        ("Type", "Medical Report"),
        ("Doctor", report.doctor_name),
        ("Patient", patient_name),
        ("Date", report.date),
        ("Diagnosis", report.content),
        ("Remarks", report.remarks),
        ("PDF_Hash", pdf_hash or "No PDF"),
        ("Blockchain", f"Solana {solana.SOLANA_NETWORK.capitalize()}"),
        ("Status", "Verified"),
        ("Created_By", SYSTEM_NAME),
        ("Patient_Wallet", patient_wallet),
        ("Doctor_Wallet", doctor_wallet),
        ("Timestamp", datetime.now(timezone.utc).isoformat()),
        ("File_Available", "Yes" if pdf_hash else "No"),
        ("Download_URL", pdf_url or ""),
    ]

    files = []
    if pdf_hash:
        files.append({
            "uri": pdf_url,
            "type": pdf_content_type or "application/pdf",
            "name": report.title,
        })

    return {
        "name": report.title,
        "symbol": NFT_SYMBOL,
        "description": report.content,
        "image": NFT_IMAGE,
        "external_url": pdf_url or "",
        "animation_url": pdf_url or "",
        "attributes": [{"trait_type": t, "value": v} for t, v in attributes],
        "properties": {
            "files": files,
            "category": "medical_report",
            "creators": [{"address": doctor_wallet, "share": 100, "verified": True}],
        },
        "collection": dict(COLLECTION),
    }


class NFTManager:
    """Creates and looks up report NFTs in the shared report store."""

    def __init__(self, reports: list[dict] | None = None):
        self.reports = store.nft_reports if reports is None else reports

    def find_by_mint(self, mint: str) -> dict | None:
        return next((r for r in self.reports if r.get("mint") == mint), None)

    async def create_medical_report_nft(
        self,
        doctor_wallet: str,
        patient_wallet: str,
        report: ReportData,
        pdf: PDFAttachment | None = None,
    ) -> dict:
        logger.info("Creating medical report NFT for patient %s", patient_wallet)

        try:
            pdf_hash = None
            pdf_url = None
            if pdf is not None:
                pdf_hash = await ipfs.upload_to_ipfs(pdf.filename, pdf.content, pdf.content_type)
                pdf_url = ipfs.gateway_url(pdf_hash)

            metadata = build_metadata(
                report,
                doctor_wallet,
                patient_wallet,
                patient_name_for(patient_wallet),
                pdf_hash,
                pdf_url,
                pdf.content_type if pdf else None,
            )

            metadata_hash = await ipfs.upload_metadata_to_ipfs(metadata)
            metadata_uri = ipfs.gateway_url(metadata_hash)

            await simulate_delay("mint")
            signature = solana.generate_signature()
            mint = solana.generate_mint_address()
            file_accessible = await ipfs.check_ipfs_file_access(pdf_hash) if pdf_hash else False

            # no await between taking the id and appending the record
            record = {
                "id": store.next_id("nft", self.reports),
                "mint": mint,
                "patient_wallet": patient_wallet,
                "doctor_wallet": doctor_wallet,
                "metadata": {**metadata, "uri": metadata_uri},
                "ipfs_hash": pdf_hash,
                "metadata_hash": metadata_hash,
                "metadata_uri": metadata_uri,
                "status": "minted",
                "transaction_signature": signature,
                "created_at": datetime.now(timezone.utc).isoformat(),
                "blockchain_confirmed": True,
                "network": solana.SOLANA_NETWORK,
                "explorer": solana.explorer_url(signature),
                "pinata_url": pdf_url or "",
                "gateway": "Pinata",
                "file_accessible": file_accessible,
                "download_url": pdf_url or "",
            }
            self.reports.append(record)
        except MedChainError:
            raise
        except Exception as e:
            logger.exception("Error creating NFT")
            raise NFTMintError(f"Failed to create NFT: {e}") from e

        store.save_snapshot()

        logger.info("NFT report %s minted: mint=%s tx=%s", record["id"], mint, signature)
        return record

    async def transfer_nft_to_patient(self, mint: str, patient_wallet: str) -> dict | None:
        """Hand the report NFT over to the patient's wallet (simulated).

        Returns the updated record, or None if the mint is unknown.
        """
        logger.info("Transferring NFT %s to patient %s", mint, patient_wallet)
        nft = self.find_by_mint(mint)
        if nft is None:
            return None

        await simulate_delay("nft_transfer")
        signature = solana.generate_signature()

        nft["status"] = "transferred"
        nft["transferred_at"] = datetime.now(timezone.utc).isoformat()
        nft["transfer_signature"] = signature
        nft["current_owner"] = patient_wallet
        nft["transfer_explorer"] = solana.explorer_url(signature)
        store.save_snapshot()

        logger.info("NFT %s transferred: tx=%s", mint, signature)
        return nft

    async def get_nft_details(self, mint: str) -> dict | None:
        nft = self.find_by_mint(mint)
        if nft is None:
            return None
        return {
            **nft,
            "on_chain": False,
            "verified": True,
            "last_updated": datetime.now(timezone.utc).isoformat(),
        }

    async def verify_nft_authenticity(self, mint: str) -> bool:
        nft = self.find_by_mint(mint)
        valid = bool(nft and nft.get("blockchain_confirmed"))
        logger.info("NFT %s verification: %s", mint, "AUTHENTIC" if valid else "INVALID")
        return valid
