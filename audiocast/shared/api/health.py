from datetime import datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel


router = APIRouter()


class HealthOut(BaseModel):
    status: str = "ok"
    timestamp: datetime


@router.get('/health', response_model=HealthOut)
async def health():
    return HealthOut(timestamp=datetime.now(timezone.utc))
