"""
MEDCHAIN API -- Clinic Demo

Walks through one visit end to end, switching between the doctor and
patient views the way the dashboards do:

  1. Resolve roles for the demo wallets
  2. Patient books an appointment
  3. Doctor approves it
  4. Doctor issues a medical report NFT and transfers it to the patient
  5. Patient lists their reports and verifies the NFT
  6. Show the notification feed

Run with:
    python demo/demo_clinic.py

Requires the API to be running at $MEDCHAIN_API_URL (default
http://localhost:8000). Start it with MEDCHAIN_LATENCY_SCALE=0.2 for a
snappier run.
"""

import sys
import time

import requests

from medchain.client import DEFAULT_BASE_URL, MedChainClient, MedChainClientError
from medchain.ledger.roles import DEMO_DOCTOR_NAME, DOCTOR_WALLET, PATIENT_WALLET

# ---------------------------------------------------------------------------
# ANSI color codes
# ---------------------------------------------------------------------------

RESET = "\033[0m"
BOLD = "\033[1m"
DIM = "\033[2m"

CYAN = "\033[36m"
GREEN = "\033[32m"
RED = "\033[31m"
YELLOW = "\033[33m"
WHITE = "\033[97m"

BG_GREEN = "\033[42m"
BG_YELLOW = "\033[43m"


def header(text: str) -> None:
    width = 64
    print()
    print(f"{CYAN}{BOLD}{'=' * width}{RESET}")
    print(f"{CYAN}{BOLD}  {text}{RESET}")
    print(f"{CYAN}{BOLD}{'=' * width}{RESET}")
    print()


def step(number: int, title: str) -> None:
    print(f"{WHITE}{BOLD}[Step {number}]{RESET} {YELLOW}{title}{RESET}")
    print(f"{DIM}{'-' * 56}{RESET}")


def status_badge(status: str) -> str:
    badges = {
        "pending": f"{BG_YELLOW}{BOLD} PENDING {RESET}",
        "confirmed": f"{BG_GREEN}{BOLD} CONFIRMED {RESET}",
        "rejected": f"{RED}{BOLD}REJECTED{RESET}",
        "minted": f"{BG_GREEN}{BOLD} MINTED {RESET}",
        "transferred": f"{BG_GREEN}{BOLD} TRANSFERRED {RESET}",
    }
    return badges.get(status, status)


def pause(seconds: float = 1.0) -> None:
    time.sleep(seconds)


# ---------------------------------------------------------------------------
# Main demo
# ---------------------------------------------------------------------------

def main() -> int:
    print()
    print(f"{CYAN}{BOLD}")
    print("  +=====================================================+")
    print("  |                                                     |")
    print("  |   M E D C H A I N   R E C O R D S   A P I           |")
    print("  |   Clinic Demo                                       |")
    print("  |                                                     |")
    print("  +=====================================================+")
    print(f"{RESET}")
    print(f"  {DIM}API: {DEFAULT_BASE_URL}{RESET}")
    print()

    try:
        r = requests.get(f"{DEFAULT_BASE_URL}/v1/health", timeout=5)
        r.raise_for_status()
        health = r.json()
    except requests.RequestException as e:
        print(f"  {RED}API not reachable: {e}{RESET}")
        print(f"  {DIM}Start it with: uvicorn medchain.main:app{RESET}")
        return 1

    print(f"  {GREEN}API healthy{RESET} -- mode: {health['mode']}, network: {health['network']}")

    mc = MedChainClient()

    header("Doctor & patient wallets")
    step(1, "Resolve dashboard roles")
    for wallet in (DOCTOR_WALLET, PATIENT_WALLET):
        print(f"  {wallet[:12]}...  ->  {BOLD}{mc.role(wallet)}{RESET}")
    print()
    pause()

    header("Appointment")
    step(2, "Patient books a consultation")
    apt = mc.book_appointment(
        DOCTOR_WALLET, PATIENT_WALLET, "2024-12-20", "10:00 AM", "Consultation",
        notes="Follow-up on blood pressure",
    )
    print(f"  {apt.id}  {apt.patient_name}  {apt.date} {apt.time}  {status_badge(apt.status)}")
    print()
    pause()

    step(3, "Doctor approves it")
    apt = mc.approve_appointment(apt.id)
    print(f"  {apt.id}  {status_badge(apt.status)}")
    try:
        mc.approve_appointment(apt.id)
    except MedChainClientError as e:
        print(f"  {DIM}Approving twice is refused ({e.status_code}).{RESET}")
    print()
    pause()

    header("Medical report NFT")
    step(4, "Doctor issues the report (pin metadata, mint, transfer)")
    report = mc.issue_report(
        doctor_wallet=DOCTOR_WALLET,
        patient_wallet=PATIENT_WALLET,
        title="Hypertension Follow-up",
        content="BP 132/84, continue Lisinopril 10mg daily",
        date="2024-12-20",
        doctor_name=DEMO_DOCTOR_NAME,
        remarks="Recheck in 3 months",
    )
    print(f"  {report.id}  {status_badge(report.status)}")
    print(f"  mint:     {report.mint}")
    print(f"  explorer: {DIM}{report.explorer}{RESET}")
    report = mc.transfer_nft(report.mint)
    print(f"  transferred to patient  {status_badge(report.status)}")
    print()
    pause()

    step(5, "Patient view: list and verify")
    for r in mc.patient_reports(PATIENT_WALLET):
        print(f"  - {r.title:45s} {status_badge(r.status)}")
    authentic = mc.verify_nft(report.mint)
    print(f"  Verification: {GREEN + 'AUTHENTIC' if authentic else RED + 'INVALID'}{RESET}")
    print()
    pause()

    header("Notification feed")
    step(6, f"Events for {PATIENT_WALLET[:12]}...")
    for event in mc.notifications(wallet=PATIENT_WALLET, limit=10):
        print(f"  #{event['id']:<4d} {event['event']:25s} {DIM}{event['timestamp']}{RESET}")
    print()

    print(f"  {GREEN}{BOLD}Demo complete.{RESET}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
