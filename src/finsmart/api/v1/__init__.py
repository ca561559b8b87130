"""API version 1 routes."""

from fastapi import APIRouter

from finsmart.api.v1 import auth, goals, transactions

router = APIRouter(prefix="/api/v1")

router.include_router(auth.router)
router.include_router(transactions.router)
router.include_router(goals.router)
