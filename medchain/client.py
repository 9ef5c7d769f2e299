"""
MedChain -- Python client

Thin client for the MedChain Records API, for scripts and dashboards
written in Python.

Usage:

    from medchain.client import MedChainClient

    mc = MedChainClient("http://localhost:8000")

    role = mc.role("Memo1UhkJRfHyvLMcVucJwxXeuD728EqVDDwQDxFMNo")   # "doctor"

    report = mc.issue_report(
        doctor_wallet=DOCTOR,
        patient_wallet=PATIENT,
        title="Blood Test Results",
        content="CBC within normal range",
        date="2024-12-10",
        doctor_name="Dr. WAHEGURU Singh",
        pdf_path="cbc.pdf",
    )
    print(report.mint, report.explorer)

    apt = mc.book_appointment(DOCTOR, PATIENT, "2024-12-20", "10:00 AM", "Consultation")
    mc.approve_appointment(apt.id)

Requirements: requests
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import requests

DEFAULT_BASE_URL = os.getenv("MEDCHAIN_API_URL", "http://localhost:8000")
DEFAULT_TIMEOUT = 60


# ── Result types ──────────────────────────────────────────────────────────


@dataclass
class Report:
    """A medical report NFT."""

    id: str
    mint: str
    patient_wallet: str
    doctor_wallet: str
    title: str
    status: str
    ipfs_hash: Optional[str] = None
    explorer: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "Report":
        return cls(
            id=data["id"],
            mint=data["mint"],
            patient_wallet=data["patient_wallet"],
            doctor_wallet=data["doctor_wallet"],
            title=data["metadata"]["name"],
            status=data["status"],
            ipfs_hash=data.get("ipfs_hash"),
            explorer=data.get("explorer"),
            raw=data,
        )


@dataclass
class AppointmentResult:
    id: str
    doctor_wallet: str
    patient_wallet: str
    patient_name: str
    date: str
    time: str
    status: str
    rejection_reason: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "AppointmentResult":
        return cls(
            id=data["id"],
            doctor_wallet=data["doctor_wallet"],
            patient_wallet=data["patient_wallet"],
            patient_name=data["patient_name"],
            date=data["date"],
            time=data["time"],
            status=data["status"],
            rejection_reason=data.get("rejection_reason"),
            raw=data,
        )


# ── Exceptions ────────────────────────────────────────────────────────────


class MedChainClientError(Exception):
    """Raised for any non-2xx API response."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


# ── Client ────────────────────────────────────────────────────────────────


class MedChainClient:
    """
    Client for the MedChain Records API.

    Args:
        base_url: API base URL. Defaults to $MEDCHAIN_API_URL or http://localhost:8000.
        timeout: Request timeout in seconds. Simulated mints take a few seconds.
        session: Optional pre-configured requests.Session.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: int = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()

    def _request(self, method: str, path: str, **kwargs) -> Any:
        url = f"{self.base_url}{path}"
        kwargs.setdefault("timeout", self.timeout)
        resp = self._session.request(method, url, **kwargs)
        if resp.status_code >= 400:
            try:
                body = resp.json()
            except ValueError:
                body = resp.text
            raise MedChainClientError(
                f"API error {resp.status_code}: {body}",
                status_code=resp.status_code,
                body=body,
            )
        if resp.status_code == 204:
            return None
        return resp.json()

    # ── Wallets ───────────────────────────────────────────────────────

    def role(self, wallet: str) -> str:
        return self._request("GET", f"/v1/wallets/{wallet}/role")["role"]

    def demo_wallets(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/v1/wallets/demo")

    # ── Reports ───────────────────────────────────────────────────────

    def issue_report(
        self,
        doctor_wallet: str,
        patient_wallet: str,
        title: str,
        content: str,
        date: str,
        doctor_name: str,
        *,
        remarks: str = "",
        pdf_path: Optional[str] = None,
    ) -> Report:
        """
        Issue (mint) a medical report NFT.

        Args:
            pdf_path: Optional PDF to pin alongside the report.

        Returns:
            The new Report.
        """
        form = {
            "doctor_wallet": doctor_wallet,
            "patient_wallet": patient_wallet,
            "title": title,
            "content": content,
            "date": date,
            "doctor_name": doctor_name,
            "remarks": remarks,
        }
        if pdf_path:
            path = Path(pdf_path)
            with path.open("rb") as fh:
                files = {"pdf": (path.name, fh, "application/pdf")}
                data = self._request("POST", "/v1/reports", data=form, files=files)
        else:
            data = self._request("POST", "/v1/reports", data=form)
        return Report.from_json(data)

    def patient_reports(self, wallet: str) -> List[Report]:
        return [Report.from_json(r) for r in self._request("GET", f"/v1/patients/{wallet}/reports")]

    def doctor_reports(self, wallet: str) -> List[Report]:
        return [Report.from_json(r) for r in self._request("GET", f"/v1/doctors/{wallet}/reports")]

    def search_reports(self, query: str = "", wallet: Optional[str] = None) -> List[Report]:
        params: Dict[str, str] = {"q": query}
        if wallet:
            params["wallet"] = wallet
        return [Report.from_json(r) for r in self._request("GET", "/v1/reports", params=params)]

    def report(self, report_id: str) -> Report:
        return Report.from_json(self._request("GET", f"/v1/reports/{report_id}"))

    def update_report_status(self, report_id: str, status: str) -> Report:
        data = self._request("PATCH", f"/v1/reports/{report_id}/status", json={"status": status})
        return Report.from_json(data)

    def export_report(self, report_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/v1/reports/{report_id}/export")

    def transfer_nft(self, mint: str, patient_wallet: Optional[str] = None) -> Report:
        data = self._request("POST", f"/v1/nfts/{mint}/transfer", json={"patient_wallet": patient_wallet})
        return Report.from_json(data)

    def verify_nft(self, mint: str) -> bool:
        return self._request("GET", f"/v1/nfts/{mint}/verify")["authentic"]

    # ── Appointments ──────────────────────────────────────────────────

    def book_appointment(
        self,
        doctor_wallet: str,
        patient_wallet: str,
        date: str,
        time: str,
        type: str,
        notes: str = "",
    ) -> AppointmentResult:
        payload = {
            "doctor_wallet": doctor_wallet,
            "patient_wallet": patient_wallet,
            "date": date,
            "time": time,
            "type": type,
            "notes": notes,
        }
        return AppointmentResult.from_json(self._request("POST", "/v1/appointments", json=payload))

    def approve_appointment(self, appointment_id: str) -> AppointmentResult:
        data = self._request("POST", f"/v1/appointments/{appointment_id}/approve")
        return AppointmentResult.from_json(data)

    def reject_appointment(self, appointment_id: str, reason: Optional[str] = None) -> AppointmentResult:
        data = self._request("POST", f"/v1/appointments/{appointment_id}/reject", json={"reason": reason})
        return AppointmentResult.from_json(data)

    # ── Notifications ─────────────────────────────────────────────────

    def notifications(
        self,
        *,
        event: Optional[str] = None,
        wallet: Optional[str] = None,
        limit: int = 50,
    ) -> List[Dict[str, Any]]:
        params: Dict[str, Any] = {"limit": limit}
        if event:
            params["event"] = event
        if wallet:
            params["wallet"] = wallet
        return self._request("GET", "/v1/notifications", params=params)
