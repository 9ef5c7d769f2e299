"""
Tests for the Python client, driven against the app in-process.

TestClient exposes the same request(method, url, **kwargs) call the
client makes on its requests.Session, so it stands in for one directly.
"""

import pytest

from medchain.client import MedChainClient, MedChainClientError, Report
from medchain.ledger.roles import DEMO_DOCTOR_NAME, DOCTOR_WALLET, PATIENT_WALLET


@pytest.fixture
def mc(client):
    return MedChainClient("http://testserver/", session=client)


class TestClientBasics:

    def test_trailing_slash_stripped(self, mc):
        assert mc.base_url == "http://testserver"

    def test_role(self, mc):
        assert mc.role(DOCTOR_WALLET) == "doctor"

    def test_demo_wallets(self, mc):
        assert len(mc.demo_wallets()) == 4

    def test_error_carries_status_and_body(self, mc):
        with pytest.raises(MedChainClientError) as exc_info:
            mc.report("nft_missing")
        assert exc_info.value.status_code == 404
        assert exc_info.value.body == {"detail": "Report 'nft_missing' not found."}


class TestReports:

    def test_issue_report(self, mc):
        report = mc.issue_report(
            DOCTOR_WALLET, PATIENT_WALLET, "ECG", "Normal sinus rhythm", "2024-12-21", DEMO_DOCTOR_NAME,
        )
        assert isinstance(report, Report)
        assert report.title == "ECG"
        assert report.status == "minted"
        assert report.ipfs_hash is None
        assert report.raw["metadata"]["symbol"] == "MEDNFT"

    def test_issue_report_with_pdf(self, mc, tmp_path):
        pdf = tmp_path / "ecg.pdf"
        pdf.write_bytes(b"%PDF-1.4 ecg")

        report = mc.issue_report(
            DOCTOR_WALLET, PATIENT_WALLET, "ECG", "Normal sinus rhythm", "2024-12-21", DEMO_DOCTOR_NAME,
            pdf_path=str(pdf),
        )

        assert report.ipfs_hash.startswith("QmMedChainMock")

    def test_listing_and_search(self, mc):
        assert [r.id for r in mc.patient_reports(PATIENT_WALLET)] == ["nft_001"]
        assert [r.id for r in mc.doctor_reports(DOCTOR_WALLET)] == ["nft_001"]
        assert [r.id for r in mc.search_reports("blood")] == ["nft_001"]
        assert mc.search_reports("blood", wallet="nobody") == []

    def test_status_export_verify(self, mc):
        assert mc.update_report_status("nft_001", "reviewed").status == "reviewed"

        report = mc.report("nft_001")
        assert mc.export_report("nft_001")["nft_mint"] == report.mint
        assert mc.verify_nft(report.mint) is True
        assert mc.verify_nft("unknownmint") is False

    def test_transfer_nft(self, mc):
        report = mc.report("nft_001")
        transferred = mc.transfer_nft(report.mint)
        assert transferred.status == "transferred"
        assert transferred.raw["current_owner"] == PATIENT_WALLET


class TestAppointments:

    def test_book_approve(self, mc):
        apt = mc.book_appointment(DOCTOR_WALLET, PATIENT_WALLET, "2024-12-22", "3:00 PM", "Follow-up")
        assert apt.status == "pending"
        assert apt.patient_name == "Mr. Singh"

        assert mc.approve_appointment(apt.id).status == "confirmed"

        with pytest.raises(MedChainClientError) as exc_info:
            mc.approve_appointment(apt.id)
        assert exc_info.value.status_code == 409

    def test_reject(self, mc):
        apt = mc.reject_appointment("apt_001", "Fully booked")
        assert apt.status == "rejected"
        assert apt.rejection_reason == "Fully booked"

    def test_notifications(self, mc):
        mc.reject_appointment("apt_001")
        events = mc.notifications(wallet=PATIENT_WALLET)
        assert [e["event"] for e in events] == ["appointment_rejected"]
        assert mc.notifications(event="nft_report_created") == []
