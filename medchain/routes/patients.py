"""Patient directory endpoints."""

from fastapi import APIRouter, HTTPException

from medchain.ledger import patients as patient_service
from medchain.models.schemas import Patient

router = APIRouter()


@router.get(
    "/v1/doctors/{wallet}/patients",
    response_model=list[Patient],
    summary="Patients visible to a doctor",
    tags=["Patients"],
)
async def doctor_patients(wallet: str) -> list[Patient]:
    return [Patient(**p) for p in await patient_service.get_doctor_patients(wallet)]


@router.get(
    "/v1/patients/{wallet}",
    response_model=Patient,
    summary="Patient profile by wallet",
    tags=["Patients"],
)
async def patient_profile(wallet: str) -> Patient:
    patient = await patient_service.get_patient_by_wallet(wallet)
    if patient is None:
        raise HTTPException(status_code=404, detail=f"No patient registered for wallet '{wallet}'.")
    return Patient(**patient)
