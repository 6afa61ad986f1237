from fastapi import APIRouter

from freightdesk.api.v1 import dashboard, email_templates, invoices, trucks, vendors

api_router = APIRouter()

api_router.include_router(invoices.router, prefix="/invoices", tags=["invoices"])
api_router.include_router(trucks.router, prefix="/trucks", tags=["trucks"])
api_router.include_router(vendors.router, prefix="/vendors", tags=["vendors"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
api_router.include_router(email_templates.router, prefix="/email-templates", tags=["email-templates"])
