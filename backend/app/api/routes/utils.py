from fastapi import APIRouter

from app.agent.llm_client import LLMClient

router = APIRouter(prefix="/utils", tags=["utils"])


@router.get("/health-check/")
async def health_check() -> bool:
    return True


@router.get("/ai-status/")
async def ai_status() -> dict[str, bool]:
    """Lets the UI grey out AI features before the user tries one."""
    return {"configured": LLMClient().is_configured}
