"""
Dashboard endpoints -- the summary cards at the top of each view.

GET /v1/dashboard/doctor/{wallet}   patients, reports issued, appointment queue
GET /v1/dashboard/patient/{wallet}  profile, report count, upcoming visits

Figures are computed from the in-memory store on every call.
"""

from datetime import date

from fastapi import APIRouter

from medchain.ledger import appointments as appointment_service
from medchain.ledger import patients as patient_service
from medchain.ledger import reports as report_service
from medchain.models.schemas import (
    Appointment,
    DoctorDashboard,
    MedicalReport,
    Patient,
    PatientDashboard,
)

router = APIRouter()

RECENT_REPORTS = 5

UPCOMING_STATUSES = {"pending", "confirmed"}


@router.get(
    "/v1/dashboard/doctor/{wallet}",
    response_model=DoctorDashboard,
    summary="Doctor dashboard figures",
    tags=["Dashboard"],
)
async def doctor_dashboard(wallet: str) -> DoctorDashboard:
    patients = await patient_service.get_doctor_patients(wallet)
    reports = await report_service.get_all_reports_for_doctor(wallet)
    appointments = await appointment_service.get_doctor_appointments(wallet)

    today = date.today().isoformat()

    return DoctorDashboard(
        doctor_wallet=wallet,
        total_patients=len(patients),
        total_reports=len(reports),
        pending_appointments=sum(1 for a in appointments if a["status"] == "pending"),
        confirmed_appointments=sum(1 for a in appointments if a["status"] == "confirmed"),
        todays_appointments=[Appointment(**a) for a in appointments if a["date"] == today],
        recent_reports=[MedicalReport(**r) for r in reversed(reports[-RECENT_REPORTS:])],
    )


@router.get(
    "/v1/dashboard/patient/{wallet}",
    response_model=PatientDashboard,
    summary="Patient dashboard figures",
    tags=["Dashboard"],
)
async def patient_dashboard(wallet: str) -> PatientDashboard:
    profile = await patient_service.get_patient_by_wallet(wallet)
    reports = await report_service.get_patient_medical_nfts(wallet)
    appointments = await appointment_service.get_patient_appointments(wallet)

    return PatientDashboard(
        patient_wallet=wallet,
        profile=Patient(**profile) if profile else None,
        report_count=len(reports),
        upcoming_appointments=[
            Appointment(**a) for a in appointments if a["status"] in UPCOMING_STATUSES
        ],
        latest_report=MedicalReport(**reports[-1]) if reports else None,
    )
