"""
Wallet role lookup.

There is no on-chain identity: a wallet address is mapped to a role by
plain string matching against the demo wallets, then a list of
"doctor-ish" substrings. Anything else is treated as a patient.
"""

import logging

from medchain.models.schemas import UserRole

logger = logging.getLogger(__name__)

USER_ROLES = {"PATIENT": UserRole.patient, "DOCTOR": UserRole.doctor}

DOCTOR_WALLET = "Memo1UhkJRfHyvLMcVucJwxXeuD728EqVDDwQDxFMNo"
PATIENT_WALLET = "DHECcpkGumi43owNpHwLRhzrnVJ7upfMA4rf9XHb5JCo"

DEMO_DOCTOR_NAME = "Dr. WAHEGURU Singh"

DEMO_WALLETS: list[dict] = [
    {
        "name": DEMO_DOCTOR_NAME,
        "address": DOCTOR_WALLET,
        "role": UserRole.doctor,
        "description": "Demo doctor wallet for testing doctor dashboard",
    },
    {
        "name": "Patient Mr. Singh",
        "address": PATIENT_WALLET,
        "role": UserRole.patient,
        "description": "Demo patient wallet for testing patient dashboard",
    },
    {
        "name": "Dr. Sarah Wilson",
        "address": "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA",
        "role": UserRole.doctor,
        "description": "Another demo doctor wallet",
    },
    {
        "name": "Patient Mrs. Kaur",
        "address": "11111111111111111111111111111112",
        "role": UserRole.patient,
        "description": "Another demo patient wallet",
    },
]

# Fallback substrings: an address containing any of these is a doctor
DOCTOR_PATTERNS = ["doc", "dr", "med", "health", "waheguru", "singh", "doctor", "memo"]


def get_user_role(wallet_address: str) -> UserRole:
    """Resolve the dashboard role for a wallet address."""
    logger.info("Checking wallet role: %s", wallet_address)

    for wallet in DEMO_WALLETS:
        if wallet["address"] == wallet_address:
            logger.info("Demo wallet detected: %s (%s)", wallet["name"], wallet["role"].value)
            return wallet["role"]

    if wallet_address == DOCTOR_WALLET:
        return UserRole.doctor
    if wallet_address == PATIENT_WALLET:
        return UserRole.patient

    address = wallet_address.lower()
    if any(pattern in address for pattern in DOCTOR_PATTERNS):
        return UserRole.doctor

    return UserRole.patient
