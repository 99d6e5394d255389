from fastapi import APIRouter

from app.config import settings
from app.dtos import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
def health_check():
    """Liveness probe. Does not call GitHub."""
    return HealthResponse(
        status="ok",
        version=settings.APP_VERSION,
        repository=f"{settings.GITHUB_REPO_OWNER}/{settings.GITHUB_REPO_NAME}",
        workflow=settings.GITHUB_WORKFLOW_FILE,
        authenticated=bool(settings.GITHUB_TOKEN),
    )
