from fastapi import FastAPI

from app.exception_handlers import register_exception_handlers
from app.routes.assignments import router as assignments_router
from app.routes.auth import router as auth_router
from app.routes.categories import router as categories_router
from app.routes.checklists import router as checklists_router
from app.routes.health import router as health_router
from app.routes.issues import router as issues_router
from app.routes.permissions import router as permissions_router
from app.routes.projects import router as projects_router
from app.routes.tags import router as tags_router
from app.routes.teams import router as teams_router
from app.routes.workspaces import router as workspaces_router

def create_app() -> FastAPI:
    app = FastAPI(title="workspace-access-api", version="0.1.0")
    register_exception_handlers(app)
    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(workspaces_router)
    app.include_router(teams_router)
    app.include_router(categories_router)
    app.include_router(tags_router)
    app.include_router(checklists_router)
    app.include_router(assignments_router)
    app.include_router(projects_router)
    app.include_router(issues_router)
    app.include_router(permissions_router)
    return app

app = create_app()
