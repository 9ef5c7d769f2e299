"""
Appointment endpoints.

Patients book (status "pending"); doctors approve ("confirmed") or
reject ("rejected"). Deciding an appointment twice returns 409.
"""

from fastapi import APIRouter, HTTPException

from medchain.ledger import appointments as appointment_service
from medchain.models.schemas import Appointment, AppointmentRequest, RejectRequest

router = APIRouter()


def _not_found(appointment_id: str) -> HTTPException:
    return HTTPException(status_code=404, detail=f"Appointment '{appointment_id}' not found.")


@router.post(
    "/v1/appointments",
    response_model=Appointment,
    status_code=201,
    summary="Book an appointment",
    tags=["Appointments"],
)
async def create_appointment(request: AppointmentRequest) -> Appointment:
    appointment = await appointment_service.create_appointment(**request.model_dump())
    return Appointment(**appointment)


@router.post(
    "/v1/appointments/{appointment_id}/approve",
    response_model=Appointment,
    summary="Approve a pending appointment",
    tags=["Appointments"],
)
async def approve(appointment_id: str) -> Appointment:
    appointment = await appointment_service.approve_appointment(appointment_id)
    if appointment is None:
        raise _not_found(appointment_id)
    return Appointment(**appointment)


@router.post(
    "/v1/appointments/{appointment_id}/reject",
    response_model=Appointment,
    summary="Reject a pending appointment",
    tags=["Appointments"],
)
async def reject(appointment_id: str, request: RejectRequest | None = None) -> Appointment:
    reason = request.reason if request else None
    appointment = await appointment_service.reject_appointment(appointment_id, reason)
    if appointment is None:
        raise _not_found(appointment_id)
    return Appointment(**appointment)


@router.get(
    "/v1/doctors/{wallet}/appointments",
    response_model=list[Appointment],
    summary="A doctor's appointments",
    tags=["Appointments"],
)
async def doctor_appointments(wallet: str) -> list[Appointment]:
    return [Appointment(**a) for a in await appointment_service.get_doctor_appointments(wallet)]


@router.get(
    "/v1/patients/{wallet}/appointments",
    response_model=list[Appointment],
    summary="A patient's appointments",
    tags=["Appointments"],
)
async def patient_appointments(wallet: str) -> list[Appointment]:
    return [Appointment(**a) for a in await appointment_service.get_patient_appointments(wallet)]
