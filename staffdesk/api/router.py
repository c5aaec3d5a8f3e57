from fastapi import APIRouter

from staffdesk.api.approvals import approvals_router
from staffdesk.api.leave import sick_leaves_router, vacations_router
from staffdesk.api.timesheets import timesheets_router
from staffdesk.api.users import tenants_router, users_router

api_router = APIRouter()
api_router.include_router(approvals_router)
api_router.include_router(vacations_router)
api_router.include_router(sick_leaves_router)
api_router.include_router(timesheets_router)
api_router.include_router(users_router)
api_router.include_router(tenants_router)
