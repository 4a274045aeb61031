"""Main API router that includes all endpoint routers."""

from fastapi import APIRouter

from app.api.v1 import auth, bookings, ops, ops_auth, reviews

api_router = APIRouter()

# Authentication
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])

# Booking requests
api_router.include_router(bookings.router, prefix="/booking-requests", tags=["Booking Requests"])

# Reviews
api_router.include_router(reviews.router, prefix="/reviews", tags=["Reviews"])

# Ops
api_router.include_router(ops_auth.router, prefix="/ops/auth", tags=["Ops Authentication"])
api_router.include_router(ops.router, prefix="/ops", tags=["Ops"])
