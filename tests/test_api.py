"""
HTTP-level tests for every route module, via FastAPI's TestClient.

Demo mode throughout (see conftest.py), so nothing leaves the process.
"""

from datetime import date

from medchain import store
from medchain.ledger import ipfs
from medchain.ledger.roles import DEMO_DOCTOR_NAME, DOCTOR_WALLET, PATIENT_WALLET

KAUR_WALLET = "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"

REPORT_FORM = {
    "doctor_wallet": DOCTOR_WALLET,
    "patient_wallet": PATIENT_WALLET,
    "title": "Chest X-Ray",
    "content": "No acute findings",
    "date": "2024-12-19",
    "doctor_name": DEMO_DOCTOR_NAME,
    "remarks": "Repeat in 12 months",
}


class TestSystem:

    def test_health(self, client):
        resp = client.get("/v1/health")
        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "healthy"
        assert body["mode"] == "demo"
        assert body["network"] == "devnet"
        assert body["reports_stored"] == 1
        assert body["appointments_stored"] == 2
        assert body["patients_registered"] == 3

    def test_health_reports_pinata_mode(self, client, pinata):
        assert client.get("/v1/health").json()["mode"] == "pinata"

    def test_root_redirects_to_docs(self, client):
        resp = client.get("/", follow_redirects=False)
        assert resp.status_code in (302, 307)
        assert resp.headers["location"] == "/docs"


class TestWallets:

    def test_demo_wallets(self, client):
        wallets = client.get("/v1/wallets/demo").json()
        assert len(wallets) == 4
        assert {w["role"] for w in wallets} == {"doctor", "patient"}

    def test_role(self, client):
        assert client.get(f"/v1/wallets/{DOCTOR_WALLET}/role").json()["role"] == "doctor"
        assert client.get(f"/v1/wallets/{PATIENT_WALLET}/role").json()["role"] == "patient"

    def test_balance_without_rpc(self, client):
        body = client.get(f"/v1/wallets/{PATIENT_WALLET}/balance").json()
        assert body == {"address": PATIENT_WALLET, "balance_sol": 0.0, "network": "devnet"}

    def test_airdrop_simulated(self, client):
        body = client.post(f"/v1/wallets/{PATIENT_WALLET}/airdrop").json()
        assert len(body["signature"]) == 88
        assert body["signature"] in body["explorer"]

    def test_airdrop_amount_validated(self, client):
        resp = client.post(f"/v1/wallets/{PATIENT_WALLET}/airdrop", json={"amount": 50})
        assert resp.status_code == 422

    def test_transfer(self, client):
        resp = client.post("/v1/wallets/transfer", json={
            "from_wallet": DOCTOR_WALLET, "to_wallet": PATIENT_WALLET, "amount": 0.25,
        })
        assert resp.status_code == 200
        assert len(resp.json()["signature"]) == 88

    def test_transaction_details(self, client):
        body = client.get("/v1/transactions/abc123").json()
        assert body["signature"] == "abc123"
        assert body["confirmation_status"] == "confirmed"
        assert body["fee"] == 5000


class TestIPFSRoutes:

    def test_upload_file(self, client):
        resp = client.post("/v1/ipfs/files", files={"file": ("scan.pdf", b"%PDF-1.4", "application/pdf")})
        assert resp.status_code == 200
        body = resp.json()
        assert body["ipfs_hash"].startswith("QmMedChainMock")
        assert body["url"] == ipfs.gateway_url(body["ipfs_hash"])

    def test_upload_too_large(self, client, monkeypatch):
        monkeypatch.setattr(ipfs, "MAX_FILE_SIZE", 4)
        resp = client.post("/v1/ipfs/files", files={"file": ("scan.pdf", b"12345", "application/pdf")})
        assert resp.status_code == 413
        assert resp.json()["detail"] == "File too large. Maximum size is 10MB."

    def test_upload_metadata(self, client):
        body = client.post("/v1/ipfs/metadata", json={"name": "Report"}).json()
        assert body["ipfs_hash"].startswith("QmMedChainMetaMock")

    def test_access(self, client):
        assert client.get("/v1/ipfs/QmMedChainMock1/access").json()["accessible"] is True
        assert client.get("/v1/ipfs/QmRealLookingHash/access").json()["accessible"] is False

    def test_fetch(self, client):
        ok = client.get("/v1/ipfs/QmMedChainMock1").json()
        assert ok["success"] is True
        assert ok["content_type"] == "application/pdf"

        missing = client.get("/v1/ipfs/QmRealLookingHash")
        assert missing.status_code == 200
        assert missing.json()["success"] is False
        assert missing.json()["error"] == "File not accessible on IPFS"


class TestReportRoutes:

    def test_issue_report_without_pdf(self, client):
        resp = client.post("/v1/reports", data=REPORT_FORM)
        assert resp.status_code == 201
        body = resp.json()
        assert body["metadata"]["name"] == "Chest X-Ray"
        assert body["ipfs_hash"] is None
        assert body["status"] == "minted"
        assert len(store.nft_reports) == 2

    def test_issue_report_with_pdf(self, client):
        resp = client.post(
            "/v1/reports",
            data=REPORT_FORM,
            files={"pdf": ("xray.pdf", b"%PDF-1.4 xray", "application/pdf")},
        )
        assert resp.status_code == 201
        body = resp.json()
        assert body["ipfs_hash"].startswith("QmMedChainMock")
        assert body["file_accessible"] is True

    def test_issue_report_missing_field(self, client):
        form = dict(REPORT_FORM)
        del form["title"]
        assert client.post("/v1/reports", data=form).status_code == 422

    def test_issue_report_pdf_too_large(self, client, monkeypatch):
        monkeypatch.setattr(ipfs, "MAX_FILE_SIZE", 4)
        resp = client.post("/v1/reports", data=REPORT_FORM, files={"pdf": ("x.pdf", b"12345", "application/pdf")})
        assert resp.status_code == 413
        assert len(store.nft_reports) == 1

    def test_legacy(self, client):
        resp = client.post("/v1/reports/legacy", json={
            "report": {"title": "MRI", "diagnosis": "Mild disc bulge"},
            "patient_wallet": PATIENT_WALLET,
        })
        assert resp.status_code == 201
        assert resp.json()["doctor_wallet"] == DOCTOR_WALLET
        assert resp.json()["metadata"]["description"] == "Mild disc bulge"

    def test_list_and_search(self, client):
        client.post("/v1/reports", data=REPORT_FORM)

        assert len(client.get("/v1/reports").json()) == 2
        assert [r["metadata"]["name"] for r in client.get("/v1/reports", params={"q": "x-ray"}).json()] == [
            "Chest X-Ray"
        ]
        assert client.get("/v1/reports", params={"wallet": KAUR_WALLET}).json() == []

    def test_get_report(self, client):
        assert client.get("/v1/reports/nft_001").json()["mint"] == store.nft_reports[0]["mint"]

    def test_get_report_missing(self, client):
        resp = client.get("/v1/reports/nft_missing")
        assert resp.status_code == 404
        assert "nft_missing" in resp.json()["detail"]

    def test_update_status(self, client):
        resp = client.patch("/v1/reports/nft_001/status", json={"status": "reviewed"})
        assert resp.status_code == 200
        assert resp.json()["status"] == "reviewed"
        assert resp.json()["updated_at"] is not None

    def test_update_status_missing(self, client):
        assert client.patch("/v1/reports/nope/status", json={"status": "x"}).status_code == 404

    def test_export(self, client):
        resp = client.get("/v1/reports/nft_001/export")
        mint = store.nft_reports[0]["mint"]
        assert resp.status_code == 200
        assert resp.headers["content-disposition"] == f'attachment; filename="medical-report-{mint}.json"'
        assert resp.json()["nft_mint"] == mint
        assert resp.json()["exported_by"] == "MedChain Health Plus"

    def test_patient_and_doctor_reports(self, client):
        client.post("/v1/reports", data=dict(REPORT_FORM, patient_wallet=KAUR_WALLET))

        assert len(client.get(f"/v1/patients/{PATIENT_WALLET}/reports").json()) == 1
        assert len(client.get(f"/v1/patients/{KAUR_WALLET}/reports").json()) == 1
        assert len(client.get(f"/v1/doctors/{DOCTOR_WALLET}/reports").json()) == 2

    def test_clear_and_refresh(self, client):
        assert client.delete("/v1/reports").status_code == 204
        assert client.get("/v1/reports").json() == []

        assert client.post("/v1/reports/refresh").json() == {"reports_loaded": 1}
        assert client.get("/v1/reports/nft_001").status_code == 200


class TestNFTRoutes:

    def test_details(self, client):
        mint = store.nft_reports[0]["mint"]
        body = client.get(f"/v1/nfts/{mint}").json()
        assert body["on_chain"] is False
        assert body["verified"] is True

    def test_details_missing(self, client):
        assert client.get("/v1/nfts/unknownmint").status_code == 404

    def test_transfer_to_patient(self, client):
        mint = store.nft_reports[0]["mint"]

        resp = client.post(f"/v1/nfts/{mint}/transfer")

        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "transferred"
        assert body["current_owner"] == PATIENT_WALLET
        assert body["transfer_explorer"].endswith("?cluster=devnet")
        assert client.get("/v1/notifications", params={"event": "nft_transferred"}).json()[0]["data"]["mint"] == mint

    def test_transfer_to_other_wallet(self, client):
        mint = store.nft_reports[0]["mint"]
        resp = client.post(f"/v1/nfts/{mint}/transfer", json={"patient_wallet": KAUR_WALLET})
        assert resp.json()["current_owner"] == KAUR_WALLET

    def test_transfer_unknown_mint(self, client):
        assert client.post("/v1/nfts/unknownmint/transfer").status_code == 404

    def test_verify(self, client):
        mint = store.nft_reports[0]["mint"]
        body = client.get(f"/v1/nfts/{mint}/verify").json()
        assert body["authentic"] is True
        assert body["chain"]["status"] == "confirmed"
        assert body["chain"]["explorer"].endswith(f"/address/{mint}?cluster=devnet")

    def test_verify_unknown_is_not_an_error(self, client):
        resp = client.get("/v1/nfts/unknownmint/verify")
        assert resp.status_code == 200
        assert resp.json()["authentic"] is False
        assert resp.json()["chain"]["status"] == "not_found"


class TestAppointmentRoutes:

    def _book(self, client, **overrides):
        payload = {
            "doctor_wallet": DOCTOR_WALLET,
            "patient_wallet": PATIENT_WALLET,
            "date": "2024-12-20",
            "time": "10:00 AM",
            "type": "Consultation",
        }
        payload.update(overrides)
        return client.post("/v1/appointments", json=payload)

    def test_book(self, client):
        resp = self._book(client, notes="Headaches")
        assert resp.status_code == 201
        assert resp.json()["status"] == "pending"
        assert resp.json()["patient_name"] == "Mr. Singh"

    def test_approve(self, client):
        resp = client.post("/v1/appointments/apt_001/approve")
        assert resp.status_code == 200
        assert resp.json()["status"] == "confirmed"

    def test_approve_twice_conflicts(self, client):
        client.post("/v1/appointments/apt_001/approve")
        resp = client.post("/v1/appointments/apt_001/approve")
        assert resp.status_code == 409
        assert "already confirmed" in resp.json()["detail"]

    def test_reject_with_and_without_body(self, client):
        resp = client.post("/v1/appointments/apt_001/reject", json={"reason": "Clinic closed"})
        assert resp.json()["status"] == "rejected"
        assert resp.json()["rejection_reason"] == "Clinic closed"

        new_id = self._book(client).json()["id"]
        resp = client.post(f"/v1/appointments/{new_id}/reject")
        assert resp.status_code == 200
        assert resp.json()["rejection_reason"] is None

    def test_missing(self, client):
        assert client.post("/v1/appointments/apt_nope/approve").status_code == 404
        assert client.post("/v1/appointments/apt_nope/reject").status_code == 404

    def test_listing(self, client):
        assert len(client.get(f"/v1/doctors/{DOCTOR_WALLET}/appointments").json()) == 2
        assert [a["id"] for a in client.get(f"/v1/patients/{KAUR_WALLET}/appointments").json()] == ["apt_002"]


class TestPatientRoutes:

    def test_doctor_patients(self, client):
        assert len(client.get(f"/v1/doctors/{DOCTOR_WALLET}/patients").json()) == 3

    def test_profile(self, client):
        assert client.get(f"/v1/patients/{KAUR_WALLET}").json()["condition"] == "Diabetes"

    def test_profile_missing(self, client):
        assert client.get("/v1/patients/nobody").status_code == 404


class TestNotificationRoutes:

    def test_feed_after_activity(self, client):
        client.post("/v1/reports", data=REPORT_FORM)
        client.post("/v1/appointments/apt_001/approve")

        events = client.get("/v1/notifications").json()
        assert [e["event"] for e in events] == ["appointment_approved", "nft_report_created"]

    def test_feed_filters(self, client):
        client.post("/v1/reports", data=REPORT_FORM)
        client.post("/v1/appointments/apt_002/reject")  # already confirmed: 409, no event

        assert client.get("/v1/notifications", params={"event": "appointment_rejected"}).json() == []
        assert len(client.get("/v1/notifications", params={"wallet": PATIENT_WALLET}).json()) == 1
        assert client.get("/v1/notifications", params={"wallet": KAUR_WALLET}).json() == []

    def test_limit_validated(self, client):
        assert client.get("/v1/notifications", params={"limit": 0}).status_code == 422


class TestDashboards:

    def test_doctor(self, client):
        client.post("/v1/appointments", json={
            "doctor_wallet": DOCTOR_WALLET,
            "patient_wallet": PATIENT_WALLET,
            "date": date.today().isoformat(),
            "time": "9:00 AM",
            "type": "Check-up",
        })
        client.post("/v1/reports", data=REPORT_FORM)

        body = client.get(f"/v1/dashboard/doctor/{DOCTOR_WALLET}").json()

        assert body["total_patients"] == 3
        assert body["total_reports"] == 2
        assert body["pending_appointments"] == 2
        assert body["confirmed_appointments"] == 1
        assert [a["time"] for a in body["todays_appointments"]] == ["9:00 AM"]
        assert [r["metadata"]["name"] for r in body["recent_reports"]] == [
            "Chest X-Ray", "Blood Test Results (Pinata IPFS)",
        ]

    def test_patient(self, client):
        body = client.get(f"/v1/dashboard/patient/{PATIENT_WALLET}").json()
        assert body["profile"]["name"] == "Mr. Singh"
        assert body["report_count"] == 1
        assert [a["id"] for a in body["upcoming_appointments"]] == ["apt_001"]
        assert body["latest_report"]["id"] == "nft_001"

    def test_unknown_patient(self, client):
        body = client.get("/v1/dashboard/patient/nobody").json()
        assert body["profile"] is None
        assert body["report_count"] == 0
        assert body["latest_report"] is None
