"""
Central API router that aggregates all route modules.
"""

from fastapi import APIRouter
from app.api.routes import users, hotels, rooms, bookings, payments, cities

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(users.router)
api_router.include_router(hotels.router)
api_router.include_router(rooms.router)
api_router.include_router(bookings.router)
api_router.include_router(payments.router)
api_router.include_router(cities.router)
