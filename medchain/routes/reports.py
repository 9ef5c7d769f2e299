"""
Medical report endpoints -- mint, list, search, update, export.

POST /v1/reports is the doctor's "issue report" form: multipart fields
plus an optional PDF. The PDF and the NFT metadata are pinned to IPFS,
the mint is simulated, and the new report is announced on the
notification feed.
"""

from fastapi import APIRouter, File, Form, HTTPException, Query, UploadFile
from fastapi.responses import JSONResponse

from medchain.ledger import reports as report_service
from medchain.ledger.nft import NFTManager, PDFAttachment, ReportData
from medchain.ledger.solana import verify_nft_on_blockchain
from medchain.models.schemas import (
    LegacyReportRequest,
    MedicalReport,
    NFTDetails,
    NFTTransferRequest,
    NFTVerifyResponse,
    RefreshResponse,
    ReportExport,
    ReportStatusUpdate,
)

router = APIRouter()


def _not_found(report_id: str) -> HTTPException:
    return HTTPException(status_code=404, detail=f"Report '{report_id}' not found.")


@router.post(
    "/v1/reports",
    response_model=MedicalReport,
    status_code=201,
    summary="Issue a medical report NFT",
    description=(
        "Uploads the optional PDF and the NFT metadata to IPFS, then mints "
        "(simulated) a report NFT owned by the patient's wallet."
    ),
    tags=["Reports"],
)
async def create_report(
    doctor_wallet: str = Form(...),
    patient_wallet: str = Form(...),
    title: str = Form(...),
    content: str = Form(..., description="Diagnosis / report body."),
    date: str = Form(...),
    doctor_name: str = Form(...),
    remarks: str = Form(""),
    pdf: UploadFile | None = File(default=None),
) -> MedicalReport:
    attachment = None
    if pdf is not None and pdf.filename:
        attachment = PDFAttachment(
            filename=pdf.filename,
            content=await pdf.read(),
            content_type=pdf.content_type or "application/pdf",
        )

    record = await report_service.create_medical_report_nft_with_pdf(
        doctor_wallet,
        patient_wallet,
        ReportData(title=title, content=content, date=date, doctor_name=doctor_name, remarks=remarks),
        attachment,
    )
    return MedicalReport(**record)


@router.post(
    "/v1/reports/legacy",
    response_model=MedicalReport,
    status_code=201,
    summary="Issue a report from a loose report object",
    description="Compatibility endpoint: description (or diagnosis) becomes the content, treatment the remarks.",
    tags=["Reports"],
)
async def create_report_legacy(request: LegacyReportRequest) -> MedicalReport:
    record = await report_service.create_medical_nft(
        request.report.model_dump(),
        request.patient_wallet,
        request.doctor_wallet,
    )
    return MedicalReport(**record)


@router.get(
    "/v1/reports",
    response_model=list[MedicalReport],
    summary="List or search reports",
    description=(
        "Without parameters, returns every report. `q` searches name, description "
        "and attribute values; `wallet` restricts to reports where that wallet is "
        "the patient or the doctor."
    ),
    tags=["Reports"],
)
async def list_reports(
    q: str = Query(default="", description="Case-insensitive search term."),
    wallet: str | None = Query(default=None),
) -> list[MedicalReport]:
    if q or wallet:
        results = await report_service.search_nft_reports(q, wallet)
    else:
        results = await report_service.get_all_nft_reports()
    return [MedicalReport(**r) for r in results]


@router.delete(
    "/v1/reports",
    status_code=204,
    summary="Clear all reports",
    description="Empties the in-memory store and the snapshot file. Demo/testing use only.",
    tags=["Reports"],
)
async def clear_reports() -> None:
    report_service.clear_all_reports()


@router.post(
    "/v1/reports/refresh",
    response_model=RefreshResponse,
    summary="Reload reports from the snapshot file",
    tags=["Reports"],
)
async def refresh_reports() -> RefreshResponse:
    return RefreshResponse(reports_loaded=report_service.refresh_reports_from_storage())


@router.get(
    "/v1/reports/{report_id}",
    response_model=MedicalReport,
    summary="Get a report",
    tags=["Reports"],
)
async def get_report(report_id: str) -> MedicalReport:
    report = await report_service.get_report_by_id(report_id)
    if report is None:
        raise _not_found(report_id)
    return MedicalReport(**report)


@router.patch(
    "/v1/reports/{report_id}/status",
    response_model=MedicalReport,
    summary="Update a report's status",
    tags=["Reports"],
)
async def update_status(report_id: str, update: ReportStatusUpdate) -> MedicalReport:
    report = await report_service.update_report_status(report_id, update.status)
    if report is None:
        raise _not_found(report_id)
    return MedicalReport(**report)


@router.get(
    "/v1/reports/{report_id}/export",
    response_model=ReportExport,
    summary="Download a report as JSON",
    tags=["Reports"],
)
async def export_report(report_id: str) -> JSONResponse:
    report = await report_service.get_report_by_id(report_id)
    if report is None:
        raise _not_found(report_id)

    export = ReportExport(**report_service.export_report_data(report))
    filename = f"medical-report-{report['mint']}.json"
    return JSONResponse(
        content=export.model_dump(mode="json"),
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get(
    "/v1/patients/{wallet}/reports",
    response_model=list[MedicalReport],
    summary="A patient's report NFTs",
    tags=["Reports"],
)
async def patient_reports(wallet: str) -> list[MedicalReport]:
    return [MedicalReport(**r) for r in await report_service.get_patient_medical_nfts(wallet)]


@router.get(
    "/v1/doctors/{wallet}/reports",
    response_model=list[MedicalReport],
    summary="Reports issued by a doctor",
    tags=["Reports"],
)
async def doctor_reports(wallet: str) -> list[MedicalReport]:
    return [MedicalReport(**r) for r in await report_service.get_all_reports_for_doctor(wallet)]


@router.get(
    "/v1/nfts/{mint}",
    response_model=NFTDetails,
    summary="NFT details by mint address",
    tags=["Reports"],
)
async def nft_details(mint: str) -> NFTDetails:
    details = await NFTManager().get_nft_details(mint)
    if details is None:
        raise HTTPException(status_code=404, detail=f"NFT '{mint}' not found.")
    return NFTDetails(**details)


@router.get(
    "/v1/nfts/{mint}/verify",
    response_model=NFTVerifyResponse,
    summary="Verify an NFT's authenticity",
    description="Unknown mints are not an error: they verify as not authentic with status not_found.",
    tags=["Reports"],
)
async def verify_nft(mint: str) -> NFTVerifyResponse:
    manager = NFTManager()
    authentic = await manager.verify_nft_authenticity(mint)
    chain = await verify_nft_on_blockchain(mint, manager.find_by_mint(mint) is not None)
    return NFTVerifyResponse(authentic=authentic, chain=chain)


@router.post(
    "/v1/nfts/{mint}/transfer",
    response_model=MedicalReport,
    summary="Transfer a report NFT to the patient",
    description=(
        "Simulated ownership transfer. Marks the report as transferred and records "
        "the transfer signature and new owner."
    ),
    tags=["Reports"],
)
async def transfer_nft(mint: str, request: NFTTransferRequest | None = None) -> MedicalReport:
    patient_wallet = request.patient_wallet if request else None
    report = await report_service.transfer_report_nft(mint, patient_wallet)
    if report is None:
        raise HTTPException(status_code=404, detail=f"NFT '{mint}' not found.")
    return MedicalReport(**report)
