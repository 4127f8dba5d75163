from fastapi import APIRouter
from sentinel.api.v1.endpoints import auth, projects, test_cases, functions, repair

api_router = APIRouter()


@api_router.get("/health", tags=["Health"])
async def health_check():
    """Simple health check endpoint for load balancer"""
    return {"status": "healthy", "service": "sentinel-backend"}


api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(projects.router, prefix="/projects", tags=["Projects"])
api_router.include_router(test_cases.router, prefix="/projects", tags=["Test Cases"])
api_router.include_router(functions.router, prefix="/functions", tags=["Functions"])
api_router.include_router(repair.router, prefix="/repair", tags=["Code Repair"])
