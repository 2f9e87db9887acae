from fastapi import APIRouter

from eduportal.modules.admin.router import router as admin_router
from eduportal.modules.admissions.router import router as admissions_router
from eduportal.modules.auth import router as auth_router
from eduportal.modules.enquiries.router import router as enquiries_router
from eduportal.modules.institutions.router import router as institutions_router
from eduportal.modules.materials.router import router as materials_router
from eduportal.modules.users.router import router as users_router
from eduportal.modules.vacancies.router import router as vacancies_router

api_router = APIRouter()

api_router.include_router(auth_router, prefix="/auth", tags=["Authentication"])

api_router.include_router(users_router, prefix="/users", tags=["Users"])

api_router.include_router(institutions_router, prefix="/institutions", tags=["Institutions"])

api_router.include_router(admissions_router, prefix="/admissions", tags=["Admissions"])

api_router.include_router(materials_router, prefix="/materials", tags=["Materials"])

api_router.include_router(vacancies_router, prefix="/vacancies", tags=["Vacancies"])

api_router.include_router(enquiries_router, prefix="/enquiries", tags=["Enquiries"])

api_router.include_router(admin_router, prefix="/admin", tags=["Admin - Accounts"])
