"""
In-memory data store for demo mode.

There is no database: reports, appointments and patients live in plain
Python lists and are lost on restart. Reports can optionally be mirrored
to a JSON snapshot file (MEDCHAIN_STORE_PATH) so a restarted server picks
them up again -- best effort only, write failures are logged and ignored.

The lists are mutated in place (never rebound) so every module that
imported them keeps seeing the same objects.
"""

import json
import logging
import os
import time
from datetime import datetime, timezone
from pathlib import Path

from medchain.ledger.ipfs import PINATA_GATEWAY
from medchain.ledger.roles import DOCTOR_WALLET, PATIENT_WALLET

logger = logging.getLogger(__name__)

STORE_PATH = os.getenv("MEDCHAIN_STORE_PATH")

# snapshot entries missing any of these are dropped on load
REQUIRED_REPORT_KEYS = ("id", "mint", "patient_wallet", "doctor_wallet", "metadata", "status", "created_at")

# ---------------------------------------------------------------------------
# Seed data
# ---------------------------------------------------------------------------

_SAMPLE_PDF_HASH = "QmMedChainPinataPDF123456789"
_SAMPLE_PDF_URL = f"{PINATA_GATEWAY}{_SAMPLE_PDF_HASH}"


def _seed_reports() -> list[dict]:
    now = datetime.now(timezone.utc).isoformat()
    return [
        {
            "id": "nft_001",
            "mint": "7xKXtg2CW87d97TXJSDpbD5jBkheTqA83TZRuJosgAsU",
            "patient_wallet": PATIENT_WALLET,
            "doctor_wallet": DOCTOR_WALLET,
            "metadata": {
                "name": "Blood Test Results (Pinata IPFS)",
                "description": (
                    "Complete blood count and lipid panel results stored on Pinata IPFS. "
                    "All values within normal range."
                ),
                "image": "https://i.imgur.com/mN4D32Z.png",
                "external_url": _SAMPLE_PDF_URL,
                "attributes": [
                    {"trait_type": "Type", "value": "Lab Report"},
                    {"trait_type": "Doctor", "value": "Dr. WAHEGURU Singh"},
                    {"trait_type": "Date", "value": "2024-12-10"},
                    {"trait_type": "Status", "value": "Normal"},
                    {"trait_type": "Patient", "value": "Mr. Singh"},
                    {"trait_type": "Blockchain", "value": "Solana"},
                    {"trait_type": "IPFS_Gateway", "value": "Pinata"},
                    {"trait_type": "Storage", "value": "Pinata IPFS"},
                    {"trait_type": "File_Available", "value": "Yes"},
                    {"trait_type": "Download_URL", "value": _SAMPLE_PDF_URL},
                ],
            },
            "created_at": now,
            "transaction_signature": (
                "5VfYmGBjjTveaktkGMJpomEK9VV35ZFWiwiSxFxdBDg9EEtHW6Hr7mJ77LqLwqwXix3SkpfB8B5o3Xa3H6RA6W5K"
            ),
            "ipfs_hash": _SAMPLE_PDF_HASH,
            "metadata_hash": "QmMedChainPinataMeta123456789",
            "status": "minted",
            "blockchain_confirmed": True,
            "pinata_url": _SAMPLE_PDF_URL,
            "gateway": "Pinata",
            "file_accessible": True,
            "download_url": _SAMPLE_PDF_URL,
        }
    ]


def _seed_patients() -> list[dict]:
    return [
        {
            "id": 1,
            "name": "Mr. Singh",
            "wallet": PATIENT_WALLET,
            "age": 45,
            "condition": "Hypertension",
            "phone": "+1 (555) 123-4567",
            "email": "singh@email.com",
            "avatar": "/patient-avatar.png",
        },
        {
            "id": 2,
            "name": "Mrs. Kaur",
            "wallet": "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA",
            "age": 38,
            "condition": "Diabetes",
            "phone": "+1 (555) 987-6543",
            "email": "kaur@email.com",
            "avatar": "/placeholder.svg?height=40&width=40",
        },
        {
            "id": 3,
            "name": "Mr. Sharma",
            "wallet": "11111111111111111111111111111112",
            "age": 52,
            "condition": "Arthritis",
            "phone": "+1 (555) 456-7890",
            "email": "sharma@email.com",
            "avatar": "/placeholder.svg?height=40&width=40",
        },
    ]


def _seed_appointments() -> list[dict]:
    now = datetime.now(timezone.utc).isoformat()
    return [
        {
            "id": "apt_001",
            "doctor_wallet": DOCTOR_WALLET,
            "patient_wallet": PATIENT_WALLET,
            "patient_name": "Mr. Singh",
            "date": "2024-12-15",
            "time": "10:00 AM",
            "type": "Consultation",
            "status": "pending",
            "notes": "Regular checkup",
            "created_at": now,
        },
        {
            "id": "apt_002",
            "doctor_wallet": DOCTOR_WALLET,
            "patient_wallet": "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA",
            "patient_name": "Mrs. Kaur",
            "date": "2024-12-15",
            "time": "2:30 PM",
            "type": "Follow-up",
            "status": "confirmed",
            "notes": "Blood test results review",
            "created_at": now,
        },
    ]


# report dicts, newest appended last
nft_reports: list[dict] = _seed_reports()

# appointment dicts
appointments: list[dict] = _seed_appointments()

# patient profiles -- read-only in this demo
patients: list[dict] = _seed_patients()


def seed_reports() -> list[dict]:
    """Fresh copy of the sample report set."""
    return _seed_reports()


def reset() -> None:
    """Restore all collections to their seed state."""
    nft_reports[:] = _seed_reports()
    appointments[:] = _seed_appointments()
    patients[:] = _seed_patients()


# ---------------------------------------------------------------------------
# Snapshot persistence
# ---------------------------------------------------------------------------

def _snapshot_path() -> Path | None:
    return Path(STORE_PATH) if STORE_PATH else None


def save_snapshot() -> None:
    """Mirror the report list to disk. Never raises."""
    path = _snapshot_path()
    if path is None:
        return
    try:
        path.write_text(json.dumps(nft_reports, indent=2, default=str))
    except OSError as e:
        logger.warning("Could not write report snapshot to %s: %s", path, e)


def _is_report(entry) -> bool:
    return isinstance(entry, dict) and all(entry.get(key) for key in REQUIRED_REPORT_KEYS)


def load_snapshot() -> list[dict]:
    """Read mirrored reports. Missing or corrupt files give an empty list."""
    path = _snapshot_path()
    if path is None or not path.exists():
        return []
    try:
        data = json.loads(path.read_text())
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("Report snapshot %s unreadable, ignoring: %s", path, e)
        return []
    if not isinstance(data, list):
        logger.warning("Report snapshot %s is not a list, ignoring", path)
        return []

    reports = [r for r in data if _is_report(r)]
    if len(reports) < len(data):
        logger.warning("Report snapshot %s: skipped %d malformed entries", path, len(data) - len(reports))
    return reports


def delete_snapshot() -> None:
    path = _snapshot_path()
    if path is None:
        return
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.warning("Could not remove report snapshot %s: %s", path, e)


def merge_snapshot() -> int:
    """Add snapshot reports not already in memory. Returns how many were added."""
    known = {r["id"] for r in nft_reports}
    added = 0
    for report in load_snapshot():
        if report["id"] not in known:
            nft_reports.append(report)
            known.add(report["id"])
            added += 1
    return added


def next_id(prefix: str, records: list[dict]) -> str:
    """Millisecond-timestamp id, bumped past any id already in `records`."""
    taken = {r.get("id") for r in records}
    stamp = int(time.time() * 1000)
    while f"{prefix}_{stamp}" in taken:
        stamp += 1
    return f"{prefix}_{stamp}"
