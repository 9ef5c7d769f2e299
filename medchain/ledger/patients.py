"""Patient directory lookups."""

import logging

from medchain import store
from medchain.ledger.latency import simulate_delay

logger = logging.getLogger(__name__)

UNKNOWN_PATIENT = "Unknown Patient"


def find_patient(wallet_address: str) -> dict | None:
    return next((p for p in store.patients if p["wallet"] == wallet_address), None)


def patient_name_for(wallet_address: str) -> str:
    patient = find_patient(wallet_address)
    return patient["name"] if patient else UNKNOWN_PATIENT


async def get_doctor_patients(doctor_wallet: str) -> list[dict]:
    # Every doctor sees the whole directory; there is no care-team mapping.
    logger.info("Fetching patients for doctor %s", doctor_wallet)
    await simulate_delay("list")
    return list(store.patients)


async def get_patient_by_wallet(wallet_address: str) -> dict | None:
    return find_patient(wallet_address)
