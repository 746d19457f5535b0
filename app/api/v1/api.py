# File: app/api/v1/api.py
from fastapi import APIRouter
from app.api.v1.endpoints import registration_fields, registration_data

# Create main API router
api_router = APIRouter()

api_router.include_router(
    registration_fields.router,
    tags=["registration-fields"]
)

api_router.include_router(
    registration_data.router,
    tags=["registration-data"]
)
