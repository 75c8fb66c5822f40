"""HTTP surface: routing, auth, admin gating and error rendering."""

from datetime import timedelta

import pytest

from app.core.deps import get_otp_service
from app.core.errors import InternalError
from app.db.store import JOB_APPLICATIONS, OFFER_LETTERS, USERS
from app.services.otp_service import OTPVerificationService

pytestmark = pytest.mark.api

API = "/api/v1"

APPLICATION_BODY = {
    "jobId": "job-1",
    "personalDetails": {
        "fullName": "Jane Mwale",
        "email": "jane@example.com",
        "phone": "+260 977 123456",
        "address": "12 Cairo Road, Lusaka",
    },
    "education": [{"degreeLevel": "UG", "institution": "UNZA"}],
    "skills": ["Python"],
    "resumeUrl": "https://files.example.com/jane.pdf",
    "coverLetter": "I would love to join.",
}

INTERVIEW_BODY = {"date": "2025-06-10", "time": "14:30", "mode": "online", "meetingLink": "https://meet.example.com/x"}
EVALUATION_BODY = {"technicalSkills": 4, "communication": 5, "fit": 4, "notes": "Good"}


@pytest.fixture
def fixed_code(client, store, email, identity, settings, clock):
    client.app.dependency_overrides[get_otp_service] = lambda: OTPVerificationService(
        store, email, identity, settings, clock=clock, code_generator=lambda: "482913"
    )
    return "482913"


def test_root_and_health(client):
    assert client.get("/").json()["status"] == "operational"
    assert client.get("/health").json()["status"] == "degraded"


class TestSignup:
    def test_otp_signup_flow(self, client, store, fixed_code):
        response = client.post(f"{API}/auth/otp", json={"email": "New@X.com", "password": "secret12"})
        assert response.status_code == 200
        assert response.json()["expiresIn"] == 600

        response = client.post(
            f"{API}/auth/otp/verify",
            json={"email": "new@x.com", "otp": fixed_code, "password": "secret12"},
        )
        assert response.status_code == 201
        uid = response.json()["uid"]
        assert store.peek(USERS, uid)["email"] == "new@x.com"

    def test_error_bodies(self, client, fixed_code, clock):
        assert client.post(
            f"{API}/auth/otp/verify", json={"email": "ghost@x.com", "otp": "1", "password": "p"}
        ).json() == {"error": "not-found", "detail": "No verification request found. Please sign up again."}

        client.post(f"{API}/auth/otp", json={"email": "a@x.com", "password": "secret12"})
        response = client.post(f"{API}/auth/otp/verify", json={"email": "a@x.com", "otp": "000000", "password": "secret12"})
        assert response.status_code == 400
        assert response.json()["error"] == "invalid-argument"
        assert response.json()["details"] == {"remaining_attempts": 2}

        clock.advance(minutes=11)
        response = client.post(f"{API}/auth/otp/verify", json={"email": "a@x.com", "otp": fixed_code, "password": "secret12"})
        assert response.status_code == 410
        assert response.json()["error"] == "deadline-exceeded"

    def test_attempts_exhausted_is_429(self, client, fixed_code):
        client.post(f"{API}/auth/otp", json={"email": "a@x.com", "password": "secret12"})
        for _ in range(2):
            client.post(f"{API}/auth/otp/verify", json={"email": "a@x.com", "otp": "000000", "password": "secret12"})

        response = client.post(f"{API}/auth/otp/verify", json={"email": "a@x.com", "otp": "000000", "password": "secret12"})
        assert response.status_code == 429
        assert response.json()["error"] == "resource-exhausted"

    def test_existing_account_is_409(self, client, identity, fixed_code):
        identity.accounts["a@x.com"] = {"uid": "uid-old", "password": "x", "email_verified": True}
        client.post(f"{API}/auth/otp", json={"email": "a@x.com", "password": "secret12"})

        response = client.post(f"{API}/auth/otp/verify", json={"email": "a@x.com", "otp": fixed_code, "password": "secret12"})
        assert response.status_code == 409
        assert response.json()["error"] == "already-exists"

    @pytest.mark.parametrize("body", [
        {"email": "a@x.com"},
        {"email": "a@x.com", "password": "123"},
        {"password": "secret12"},
    ])
    def test_malformed_signup_is_invalid_argument(self, client, store, body):
        response = client.post(f"{API}/auth/otp", json=body)

        assert response.status_code == 400
        assert response.json()["error"] == "invalid-argument"
        assert response.json()["details"]["errors"]
        assert store.collections == {}

    def test_missing_field_named_in_detail(self, client):
        response = client.post(f"{API}/auth/otp", json={"email": "a@x.com"})

        assert response.json()["detail"].startswith("password:")
        assert response.json()["details"]["errors"][0]["field"] == "password"

    def test_me(self, client, store, clock, applicant_headers):
        assert client.get(f"{API}/auth/me").status_code == 401
        assert client.get(f"{API}/auth/me", headers={"Authorization": "Bearer bogus"}).status_code == 401
        assert client.get(f"{API}/auth/me", headers=applicant_headers).status_code == 404

        store.seed(USERS, "uid-applicant", {"uid": "uid-applicant", "email": "jane@example.com", "role": "user"})
        body = client.get(f"{API}/auth/me", headers=applicant_headers).json()
        assert body["email"] == "jane@example.com"
        assert body["role"] == "user"


class TestApplicantFlow:
    def test_public_job_listing_hides_expired(self, client, clock, seed_posting):
        seed_posting("job-1")
        seed_posting("job-2", expiryDateTime=clock() - timedelta(hours=1))

        jobs = client.get(f"{API}/jobs/").json()
        assert [j["id"] for j in jobs] == ["job-1"]
        assert jobs[0]["jobTitle"] == "Backend Engineer"
        assert client.get(f"{API}/jobs/job-2").status_code == 404

    def test_submit_and_list_own(self, client, email, seed_posting, applicant_headers):
        seed_posting()

        assert client.post(f"{API}/applications/", json=APPLICATION_BODY).status_code == 401
        response = client.post(f"{API}/applications/", json=APPLICATION_BODY, headers=applicant_headers)
        assert response.status_code == 201
        body = response.json()
        assert body["application"]["status"] == "pending"
        assert body["application"]["allowedActions"] == ["shortlist", "hold", "reject"]
        assert body["notification"]["delivered"] is True

        mine = client.get(f"{API}/applications/me", headers=applicant_headers).json()
        assert [a["id"] for a in mine] == [body["application"]["id"]]

    def test_submit_invalid(self, client, seed_posting, applicant_headers):
        seed_posting()

        response = client.post(
            f"{API}/applications/", json={**APPLICATION_BODY, "skills": []}, headers=applicant_headers
        )
        assert response.status_code == 400
        assert response.json()["error"] == "invalid-argument"


class TestAdminGate:
    @pytest.mark.parametrize("method, path", [
        ("get", "/admin/jobs"),
        ("get", "/admin/applications/"),
        ("post", "/admin/applications/app-1/hold"),
        ("get", "/admin/offers/app-1"),
        ("get", "/admin/reports/summary"),
    ])
    def test_non_admin_forbidden(self, client, applicant_headers, method, path):
        response = getattr(client, method)(f"{API}{path}", headers=applicant_headers)
        assert response.status_code == 403
        assert response.json() == {"error": "permission-denied", "detail": "Admin access required"}

    def test_anonymous_unauthenticated(self, client):
        assert client.get(f"{API}/admin/jobs").status_code == 401

    def test_admin_by_allow_list(self, client, settings, applicant_headers):
        settings.ADMIN_EMAILS = ["jane@example.com"]

        assert client.get(f"{API}/admin/jobs", headers=applicant_headers).status_code == 200

    def test_admin_by_profile_role(self, client, store, applicant_headers):
        store.seed(USERS, "uid-applicant", {"uid": "uid-applicant", "email": "jane@example.com", "role": "admin"})

        assert client.get(f"{API}/admin/reports/summary", headers=applicant_headers).status_code == 200


class TestAdminJobs:
    def test_crud(self, client, admin_headers):
        response = client.post(
            f"{API}/admin/jobs",
            json={"jobTitle": "QA Engineer", "employmentType": "Full-time", "salaryMin": 1, "salaryMax": 2},
            headers=admin_headers,
        )
        assert response.status_code == 201
        job_id = response.json()["id"]
        assert response.json()["expired"] is False

        response = client.put(f"{API}/admin/jobs/{job_id}", json={"location": "Remote"}, headers=admin_headers)
        assert response.json()["location"] == "Remote"
        assert response.json()["jobTitle"] == "QA Engineer"

        assert client.delete(f"{API}/admin/jobs/{job_id}", headers=admin_headers).status_code == 204
        assert client.get(f"{API}/admin/jobs/{job_id}", headers=admin_headers).status_code == 404

    def test_expired_state_filter(self, client, clock, seed_posting, admin_headers):
        seed_posting("job-1")
        seed_posting("job-2", expiryDateTime=clock() - timedelta(days=1))

        expired = client.get(f"{API}/admin/jobs", params={"state": "expired"}, headers=admin_headers).json()
        assert [(j["id"], j["expired"]) for j in expired] == [("job-2", True)]

    def test_departments(self, client, admin_headers):
        assert client.post(f"{API}/admin/departments", json={"name": "Finance"}, headers=admin_headers).status_code == 201
        response = client.post(f"{API}/admin/departments", json={"name": "Finance"}, headers=admin_headers)
        assert response.status_code == 409

        names = [d["name"] for d in client.get(f"{API}/admin/departments", headers=admin_headers).json()]
        assert names == ["Finance"]


class TestScreeningAndOffers:
    def test_full_pipeline(self, client, store, email, seed_application, admin_headers):
        seed_application()

        response = client.post(f"{API}/admin/applications/app-1/shortlist", json=INTERVIEW_BODY, headers=admin_headers)
        assert response.status_code == 200
        body = response.json()
        assert body["application"]["status"] == "shortlisted"
        assert body["application"]["interview"]["meetingLink"] == "https://meet.example.com/x"
        assert body["notification"]["delivered"] is True

        response = client.post(f"{API}/admin/applications/app-1/select", json=EVALUATION_BODY, headers=admin_headers)
        assert response.json()["application"]["evaluation"]["evaluatedBy"] == "hr@example.com"
        assert response.json()["application"]["allowedActions"] == []

        offer = client.get(f"{API}/admin/offers/app-1", headers=admin_headers).json()
        assert offer["candidateName"] == "Jane Mwale"
        assert offer["status"] == "draft"

        client.put(f"{API}/admin/offers/app-1", json={"salary": 1200000}, headers=admin_headers)
        response = client.post(f"{API}/admin/offers/app-1/send", json={"joiningDate": "2025-07-01"}, headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["offer"]["status"] == "sent"
        assert response.json()["offer"]["joiningDate"] == "2025-07-01"
        assert store.peek(OFFER_LETTERS, "app-1")["salary"] == 1200000
        assert email.last["subject"] == "Offer of Employment - Backend Engineer"

        summary = client.get(f"{API}/admin/reports/summary", headers=admin_headers).json()
        assert summary["totals"]["offersSent"] == 1
        assert summary["statusBreakdown"] == [{"status": "selected", "name": "Selected", "value": 1}]

    def test_illegal_transition_is_409(self, client, seed_application, admin_headers):
        seed_application(status="selected")

        response = client.post(f"{API}/admin/applications/app-1/hold", headers=admin_headers)
        assert response.status_code == 409
        assert response.json()["error"] == "failed-precondition"

    def test_invalid_interview_is_400(self, client, store, seed_application, admin_headers):
        seed_application()

        response = client.post(
            f"{API}/admin/applications/app-1/shortlist",
            json={"date": "2025-06-10", "time": "14:30", "mode": "offline"},
            headers=admin_headers,
        )
        assert response.status_code == 400
        assert store.peek(JOB_APPLICATIONS, "app-1")["status"] == "pending"

    @pytest.mark.parametrize("status, action, body", [
        ("shortlisted", "select", {**EVALUATION_BODY, "technicalSkills": 9}),
        ("shortlisted", "reject-after-interview", {"communication": 3, "fit": 3}),
        ("pending", "shortlist", {**INTERVIEW_BODY, "mode": "phone"}),
    ])
    def test_malformed_transition_input_is_invalid_argument(
        self, client, store, email, seed_application, admin_headers, status, action, body
    ):
        seed_application(status=status)

        response = client.post(f"{API}/admin/applications/app-1/{action}", json=body, headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["error"] == "invalid-argument"
        assert store.peek(JOB_APPLICATIONS, "app-1")["status"] == status
        assert email.sent == []

    def test_email_failure_reported_and_resend(self, client, email, seed_application, admin_headers):
        seed_application()
        email.fail_with = InternalError("Email service timed out")

        body = client.post(f"{API}/admin/applications/app-1/reject", headers=admin_headers).json()
        assert body["application"]["status"] == "rejected"
        assert body["notification"] == {
            "delivered": False, "messageId": None, "error": "internal", "detail": "Email service timed out",
        }

        email.fail_with = None
        body = client.post(f"{API}/admin/applications/app-1/notify", headers=admin_headers).json()
        assert body["notification"]["delivered"] is True

    def test_queue_tabs(self, client, seed_application, admin_headers):
        seed_application("a", status="on_hold")
        seed_application("b", status="selected")

        pending = client.get(f"{API}/admin/applications/", params={"tab": "pending"}, headers=admin_headers).json()
        assert [a["id"] for a in pending] == ["a"]
        assert client.get(
            f"{API}/admin/applications/", params={"tab": "bogus"}, headers=admin_headers
        ).status_code == 400

    def test_offer_requires_selected(self, client, seed_application, admin_headers):
        seed_application(status="shortlisted")

        response = client.get(f"{API}/admin/offers/app-1", headers=admin_headers)
        assert response.status_code == 409
