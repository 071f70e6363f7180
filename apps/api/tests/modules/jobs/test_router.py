"""
Router tests for the jobs endpoints.

Dependencies are overridden so requests never reach Postgres or Redis.
"""

from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from jobsphere.core.auth import CurrentUser
from jobsphere.core.database import get_db
from jobsphere.modules.jobs import router as jobs_router
from jobsphere.modules.jobs.cache import ListingCache, get_listing_cache
from jobsphere.modules.jobs.service import JobForbiddenError
from jobsphere.modules.users.models import UserRole


@pytest.fixture
def company_actor():
    return CurrentUser(id=uuid4(), email="acme@x.com", role=UserRole.COMPANY)


@pytest.fixture
def client(mock_db, company_actor):
    app = FastAPI()
    app.include_router(jobs_router.router, prefix="/api/v1/jobs")

    async def override_db():
        yield mock_db

    app.dependency_overrides[get_db] = override_db
    app.dependency_overrides[get_listing_cache] = lambda: ListingCache(None)
    app.dependency_overrides[jobs_router.require_company] = lambda: company_actor
    app.dependency_overrides[jobs_router.require_company_or_admin] = lambda: company_actor
    return TestClient(app)


class TestCreateJobEndpoint:
    def test_empty_location_is_rejected(self, client):
        with patch.object(jobs_router.service, "create_job", new_callable=AsyncMock) as create:
            response = client.post(
                "/api/v1/jobs",
                json={
                    "title": "Backend Intern",
                    "type": "INTERNSHIP",
                    "location": "",
                    "description": "Build APIs.",
                },
            )

        assert response.status_code == 422
        create.assert_not_called()

    def test_unknown_type_is_rejected(self, client):
        with patch.object(jobs_router.service, "create_job", new_callable=AsyncMock) as create:
            response = client.post(
                "/api/v1/jobs",
                json={
                    "title": "Backend Intern",
                    "type": "CONTRACT",
                    "location": "Remote",
                    "description": "Build APIs.",
                },
            )

        assert response.status_code == 422
        create.assert_not_called()


class TestUpdateJobEndpoint:
    def test_forbidden_maps_to_403(self, client):
        with patch.object(
            jobs_router.service,
            "update_job",
            new_callable=AsyncMock,
            side_effect=JobForbiddenError(),
        ):
            response = client.patch(f"/api/v1/jobs/{uuid4()}", json={"title": "Mine"})

        assert response.status_code == 403
        assert response.json()["detail"]["error"] == "JOB_FORBIDDEN"


class TestSearchEndpoint:
    def test_search_passes_filters(self, client):
        with patch.object(
            jobs_router.service, "search_jobs", new_callable=AsyncMock, return_value=[]
        ) as search:
            response = client.get(
                "/api/v1/jobs", params={"type": "internship", "location": "remote"}
            )

        assert response.status_code == 200
        assert response.json() == {"jobs": []}
        assert search.await_args.kwargs == {
            "job_type": "internship",
            "location": "remote",
            "search": None,
        }

    def test_requires_no_authentication(self, mock_db):
        app = FastAPI()
        app.include_router(jobs_router.router, prefix="/api/v1/jobs")

        async def override_db():
            yield mock_db

        app.dependency_overrides[get_db] = override_db
        app.dependency_overrides[get_listing_cache] = lambda: ListingCache(None)

        with patch.object(
            jobs_router.service, "search_jobs", new_callable=AsyncMock, return_value=[]
        ):
            response = TestClient(app).get("/api/v1/jobs")

        assert response.status_code == 200

    def test_create_requires_authentication(self, mock_db):
        app = FastAPI()
        app.include_router(jobs_router.router, prefix="/api/v1/jobs")

        response = TestClient(app).post("/api/v1/jobs", json={})

        assert response.status_code == 401


class TestApprovalEndpoint:
    def test_approval_is_not_served_under_jobs(self, client):
        with patch.object(
            jobs_router.service, "set_job_approval", new_callable=AsyncMock
        ) as approve:
            response = client.patch(
                f"/api/v1/jobs/{uuid4()}/approve", json={"is_approved": True}
            )

        assert response.status_code in (404, 405)
        approve.assert_not_called()
