from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

router = APIRouter(tags=["health"])


@router.get("/healthcheck", response_class=PlainTextResponse)
def healthcheck() -> str:
    return "ok"
