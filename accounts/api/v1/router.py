"""API v1 router aggregation.

Public routes (login, registration) and protected routes (bearer
credential required) are mounted from separate routers so the
authentication gate only runs where it applies.
"""

from fastapi import APIRouter

from accounts.api.v1.endpoints import auth, ops, users

api_router = APIRouter()

api_router.include_router(auth.router, tags=["auth"])
api_router.include_router(auth.protected_router, tags=["auth"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(users.protected_router, prefix="/users", tags=["users"])
api_router.include_router(ops.router, prefix="/ops", tags=["ops"])
