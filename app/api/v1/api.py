from fastapi import APIRouter

from app.api.v1.endpoints import (
    attempts,
    exercises,
    students,
)

api_router = APIRouter()
api_router.include_router(
    exercises.router,
    prefix='/exercises',
    tags=['exercises'],
)
api_router.include_router(
    attempts.router,
    prefix='/attempts',
    tags=['attempts'],
)
api_router.include_router(
    students.router,
    prefix='/students',
    tags=['students'],
)
