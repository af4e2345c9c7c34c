from datetime import datetime, timezone

from fastapi import APIRouter

from shipyard.api.endpoints import activities, databases, domains, projects, system_metrics

api_router = APIRouter()


@api_router.get("/health", tags=["health"])
def health_check():
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}


api_router.include_router(projects.router, prefix="/projects", tags=["projects"])
api_router.include_router(domains.router, prefix="/domains", tags=["domains"])
api_router.include_router(databases.router, prefix="/databases", tags=["databases"])
api_router.include_router(activities.router, prefix="/activities", tags=["activities"])
api_router.include_router(system_metrics.router, prefix="/system-metrics", tags=["system-metrics"])
