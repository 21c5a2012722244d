from fastapi import APIRouter

from app.core.config import settings

router = APIRouter(tags=["root"])


@router.get("/")
def root():
    return {
        "name": "Employee Management Backend",
        "environment": settings.APP_ENV,
        "status": "ok",
        "docs": "/docs",
        "health": "/health",
        "resources": ["/departments", "/employees"],
    }
