from fastapi import APIRouter
from .endpoints import auth, tasks, todos, users

router = APIRouter()

# Include all API endpoints
router.include_router(auth.router, prefix="/auth", tags=["authentication"])
router.include_router(tasks.router, prefix="/tasks", tags=["tasks"])
router.include_router(todos.router, prefix="/todos", tags=["todos"])
router.include_router(users.router, prefix="/users", tags=["users"])
