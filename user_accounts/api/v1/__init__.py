"""
API routes.
"""

from fastapi import APIRouter

from user_accounts.api.v1 import auth

router = APIRouter()

router.include_router(auth.router, tags=["Authentication"])
