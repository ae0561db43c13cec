"""API v1 汇总路由：统一挂载所有版本化的子路由。"""

from fastapi import APIRouter

from app.packages.hierarchy.api.v1.endpoints import access, auth, org_units, section_forms, sections, users

api_router = APIRouter()
api_router.include_router(auth.router)
api_router.include_router(access.router)
api_router.include_router(org_units.router)
api_router.include_router(sections.router)
api_router.include_router(section_forms.router)
api_router.include_router(users.router)
