"""
Main API router that includes all route modules.
"""
from fastapi import APIRouter
from daylog.api.routes import auth, users, activities, custom_options

api_router = APIRouter()

# Include all route modules
api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(activities.router)
api_router.include_router(custom_options.router)
