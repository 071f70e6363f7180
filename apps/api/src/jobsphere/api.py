from fastapi import APIRouter

from jobsphere.modules.admin.router import router as admin_router
from jobsphere.modules.applications.router import router as applications_router
from jobsphere.modules.auth.router import router as auth_router
from jobsphere.modules.contact.router import router as contact_router
from jobsphere.modules.jobs.router import router as jobs_router
from jobsphere.modules.users.router import router as me_router

api_router = APIRouter()

api_router.include_router(auth_router, prefix="/auth", tags=["Authentication"])

api_router.include_router(me_router, prefix="/me", tags=["Users"])

api_router.include_router(jobs_router, prefix="/jobs", tags=["Jobs"])

api_router.include_router(applications_router, tags=["Applications"])

api_router.include_router(admin_router, prefix="/admin", tags=["Admin"])

api_router.include_router(contact_router, prefix="/contact", tags=["Contact"])
