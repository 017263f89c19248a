# storefront/api/routers/health.py
from fastapi import APIRouter, Request, Response

from storefront.domain.schemas import HealthOut

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthOut)
def health(request: Request, response: Response):
    ok = request.app.state.store.ping()
    if not ok:
        response.status_code = 503
    return {"status": "ok" if ok else "degraded", "store": ok}
