from fastapi import APIRouter
from rallypoint.api.auth.router import router as auth_router
from rallypoint.api.users.router import router as user_router
from rallypoint.api.events.router import router as events_router
from rallypoint.api.hourlogs.router import router as hourlogs_router
from rallypoint.api.admin.router import router as admin_router
from rallypoint.api.messages.router import router as messages_router
from rallypoint.api.ai.router import router as ai_router

api_router = APIRouter(
    prefix="/api",
    responses={404: {"description": "Not found"}},
)

api_router.include_router(router=auth_router, tags=["auth"])
api_router.include_router(router=user_router, tags=["users"])
api_router.include_router(router=events_router, tags=["events"])
api_router.include_router(router=hourlogs_router, tags=["hours"])
api_router.include_router(router=admin_router, tags=["admin"])
api_router.include_router(router=messages_router, tags=["messages"])
api_router.include_router(router=ai_router, tags=["ai"])
