from fastapi import APIRouter

from src.lynkskill.api.v1 import audit, company_code, invitations, members, notifications, roles

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(members.router)
api_router.include_router(invitations.router)
api_router.include_router(company_code.router)
api_router.include_router(roles.router)
api_router.include_router(audit.router)
api_router.include_router(notifications.router)
