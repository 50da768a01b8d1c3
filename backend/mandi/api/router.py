"""
Main API router that includes all route modules.
"""
from fastapi import APIRouter
from mandi.api.routes import (
    auth, users, kisans, vyaparis, products,
    transactions, payments, statements, settings
)

api_router = APIRouter()

# Include all route modules
api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(kisans.router)
api_router.include_router(vyaparis.router)
api_router.include_router(products.router)
api_router.include_router(transactions.router)
api_router.include_router(payments.router)
api_router.include_router(statements.router)
api_router.include_router(settings.router)
