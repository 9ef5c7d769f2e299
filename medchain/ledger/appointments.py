"""
Appointment scheduling.

Patients request appointments, doctors approve or reject them. The only
transitions are pending -> confirmed and pending -> rejected; trying to
act on an appointment that has already been decided is an error.
"""

import logging
from datetime import datetime, timezone

from medchain import store
from medchain.errors import InvalidAppointmentState
from medchain.ledger.latency import simulate_delay
from medchain.ledger.patients import patient_name_for
from medchain.notifications import (
    APPOINTMENT_APPROVED,
    APPOINTMENT_CREATED,
    APPOINTMENT_REJECTED,
    NotificationService,
)

logger = logging.getLogger(__name__)

PENDING = "pending"
CONFIRMED = "confirmed"
REJECTED = "rejected"


def _find(appointment_id: str) -> dict | None:
    return next((a for a in store.appointments if a["id"] == appointment_id), None)


def _event_data(appointment: dict) -> dict:
    return {
        "appointment_id": appointment["id"],
        "patient_wallet": appointment["patient_wallet"],
        "doctor_wallet": appointment["doctor_wallet"],
        "appointment": appointment,
    }


async def create_appointment(
    doctor_wallet: str,
    patient_wallet: str,
    date: str,
    time: str,
    type: str,
    notes: str = "",
) -> dict:
    logger.info("Creating appointment: doctor=%s patient=%s %s %s", doctor_wallet, patient_wallet, date, time)

    appointment = {
        "id": store.next_id("apt", store.appointments),
        "doctor_wallet": doctor_wallet,
        "patient_wallet": patient_wallet,
        "date": date,
        "time": time,
        "type": type,
        "notes": notes,
        "patient_name": patient_name_for(patient_wallet),
        "status": PENDING,
        "created_at": datetime.now(timezone.utc).isoformat(),
    }
    store.appointments.append(appointment)

    await simulate_delay("appointment_create")

    NotificationService.emit(APPOINTMENT_CREATED, _event_data(appointment))
    return appointment


def _decide(appointment: dict, status: str) -> None:
    if appointment["status"] != PENDING:
        raise InvalidAppointmentState(
            f"Appointment '{appointment['id']}' is already {appointment['status']}."
        )
    appointment["status"] = status


async def approve_appointment(appointment_id: str) -> dict | None:
    logger.info("Approving appointment %s", appointment_id)
    appointment = _find(appointment_id)
    if appointment is not None:
        _decide(appointment, CONFIRMED)
        appointment["approved_at"] = datetime.now(timezone.utc).isoformat()

    await simulate_delay("appointment_update")

    if appointment is not None:
        NotificationService.emit(APPOINTMENT_APPROVED, _event_data(appointment))
    return appointment


async def reject_appointment(appointment_id: str, reason: str | None = None) -> dict | None:
    logger.info("Rejecting appointment %s", appointment_id)
    appointment = _find(appointment_id)
    if appointment is not None:
        _decide(appointment, REJECTED)
        appointment["rejected_at"] = datetime.now(timezone.utc).isoformat()
        appointment["rejection_reason"] = reason

    await simulate_delay("appointment_update")

    if appointment is not None:
        NotificationService.emit(APPOINTMENT_REJECTED, _event_data(appointment))
    return appointment


async def get_doctor_appointments(doctor_wallet: str) -> list[dict]:
    results = [a for a in store.appointments if a["doctor_wallet"] == doctor_wallet]
    await simulate_delay("list")
    return results


async def get_patient_appointments(patient_wallet: str) -> list[dict]:
    results = [a for a in store.appointments if a["patient_wallet"] == patient_wallet]
    await simulate_delay("list")
    return results
