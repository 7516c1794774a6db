"""
Central API router that aggregates all route modules.
"""

from fastapi import APIRouter
from devevents.api.routes import users, events, bookings

api_router = APIRouter(prefix="/api")
api_router.include_router(users.router)
api_router.include_router(events.router)
api_router.include_router(bookings.router)
