from fastapi import APIRouter

from cookbook_club.api.routers import club, cookbook, meetups, members, notifications, recipes, users

api_router = APIRouter()

api_router.include_router(club.router)
api_router.include_router(users.router)
api_router.include_router(members.router)
api_router.include_router(meetups.router)
api_router.include_router(recipes.router)
api_router.include_router(cookbook.router)
api_router.include_router(notifications.router)
