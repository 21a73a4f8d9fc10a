"""
Test suite for the /jobs endpoints.

Tests cover:
- Job creation (admin only)
- Listing with title, minSalary and hasEquity filters
- Job retrieval
- Partial updates and deletion
"""

URL = "/api/v1/jobs"

NEW_JOB = {"title": "new", "salary": 10, "equity": "0.2", "companyHandle": "c1"}


def titles(response):
    return [job["title"] for job in response.json()["jobs"]]


class TestJobCreation:
    """Tests for job creation endpoint"""

    def test_admin_can_create(self, client, admin_headers):
        response = client.post(URL, json=NEW_JOB, headers=admin_headers)

        assert response.status_code == 201
        job = response.json()["job"]
        assert isinstance(job["id"], int)
        assert {k: v for k, v in job.items() if k != "id"} == NEW_JOB

    def test_non_admin_forbidden(self, client, user_headers):
        response = client.post(URL, json=NEW_JOB, headers=user_headers)
        assert response.status_code == 403

    def test_anon_unauthorized(self, client):
        response = client.post(URL, json=NEW_JOB)
        assert response.status_code == 401

    def test_missing_fields(self, client, admin_headers):
        response = client.post(URL, json={"title": "new"}, headers=admin_headers)
        assert response.status_code == 422

    def test_equity_above_one(self, client, admin_headers):
        response = client.post(URL, json={**NEW_JOB, "equity": "1.5"}, headers=admin_headers)
        assert response.status_code == 422

    def test_negative_salary(self, client, admin_headers):
        response = client.post(URL, json={**NEW_JOB, "salary": -1}, headers=admin_headers)
        assert response.status_code == 422

    def test_duplicate_title(self, client, admin_headers):
        response = client.post(URL, json={**NEW_JOB, "title": "j1"}, headers=admin_headers)
        assert response.status_code == 400

    def test_unknown_company(self, client, admin_headers):
        response = client.post(URL, json={**NEW_JOB, "companyHandle": "nope"}, headers=admin_headers)
        assert response.status_code == 404


class TestJobList:
    """Tests for job listing and filters"""

    def test_anon_can_list(self, client):
        response = client.get(URL)

        assert response.status_code == 200
        assert titles(response) == ["j1", "j2", "j3", "j4"]

    def test_equity_is_a_string(self, client):
        response = client.get(URL)
        equity = {job["title"]: job["equity"] for job in response.json()["jobs"]}
        assert equity["j4"] == "0.043"

    def test_has_equity(self, client):
        response = client.get(URL, params={"hasEquity": "true"})
        assert titles(response) == ["j4"]

    def test_has_equity_false_returns_everything(self, client):
        response = client.get(URL, params={"hasEquity": "false"})
        assert titles(response) == ["j1", "j2", "j3", "j4"]

    def test_title_case_insensitive(self, client):
        response = client.get(URL, params={"title": "J1"})
        assert titles(response) == ["j1"]

    def test_min_salary(self, client):
        response = client.get(URL, params={"minSalary": 100000})
        assert titles(response) == ["j1", "j2"]

    def test_all_filters(self, client):
        response = client.get(URL, params={"title": "j", "minSalary": 60000, "hasEquity": "true"})
        assert titles(response) == ["j4"]

    def test_invalid_min_salary(self, client):
        response = client.get(URL, params={"minSalary": "lots"})
        assert response.status_code == 422


class TestJobRetrieval:
    """Tests for job retrieval endpoint"""

    def test_get_job(self, client):
        response = client.get(f"{URL}/j1")

        assert response.status_code == 200
        job = response.json()["job"]
        assert job["title"] == "j1"
        assert job["salary"] == 110000
        assert job["companyHandle"] == "c1"

    def test_job_not_found(self, client):
        response = client.get(f"{URL}/nope")

        assert response.status_code == 404
        assert response.json()["detail"] == "No job: nope"


class TestJobUpdate:
    """Tests for partial job updates"""

    def test_admin_can_update(self, client, admin_headers):
        response = client.patch(f"{URL}/j1", json={"title": "j1-new", "salary": 1}, headers=admin_headers)

        assert response.status_code == 200
        job = response.json()["job"]
        assert (job["title"], job["salary"], job["companyHandle"]) == ("j1-new", 1, "c1")

    def test_nulls_leave_fields_alone(self, client, admin_headers):
        response = client.patch(f"{URL}/j1", json={"title": "j1-new", "salary": None}, headers=admin_headers)
        assert response.json()["job"]["salary"] == 110000

    def test_non_admin_forbidden(self, client, user_headers):
        response = client.patch(f"{URL}/j1", json={"salary": 1}, headers=user_headers)
        assert response.status_code == 403

    def test_rename_to_taken_title(self, client, admin_headers):
        response = client.patch(f"{URL}/j1", json={"title": "j2"}, headers=admin_headers)

        assert response.status_code == 400
        assert "duplicate" in response.json()["detail"].lower()

    def test_company_handle_rejected(self, client, admin_headers):
        response = client.patch(f"{URL}/j1", json={"companyHandle": "c2"}, headers=admin_headers)
        assert response.status_code == 422

    def test_empty_body(self, client, admin_headers):
        response = client.patch(f"{URL}/j1", json={}, headers=admin_headers)
        assert response.status_code == 400

    def test_not_found(self, client, admin_headers):
        response = client.patch(f"{URL}/nope", json={"salary": 1}, headers=admin_headers)
        assert response.status_code == 404


class TestJobDeletion:
    """Tests for job deletion"""

    def test_admin_can_delete(self, client, admin_headers):
        response = client.delete(f"{URL}/j1", headers=admin_headers)

        assert response.status_code == 200
        assert response.json() == {"deleted": "j1"}
        assert client.get(f"{URL}/j1").status_code == 404

    def test_non_admin_forbidden(self, client, user_headers):
        response = client.delete(f"{URL}/j1", headers=user_headers)
        assert response.status_code == 403

    def test_not_found(self, client, admin_headers):
        response = client.delete(f"{URL}/nope", headers=admin_headers)
        assert response.status_code == 404
