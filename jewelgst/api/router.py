from fastapi import APIRouter

from jewelgst.api.routes import reports

api_router = APIRouter()

api_router.include_router(reports.router)
