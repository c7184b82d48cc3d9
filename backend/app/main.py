from functools import partial
from fastapi import FastAPI
from app.core.config import settings
from app.core.map_runtime import MapRuntimeLoader
from app.repos.session_repo import SessionRepository
from app.routes.session_route import router as session_router
from app.routes.route_finder_route import router as route_router
from app.services.Map_service import open_map

def create_app() -> FastAPI:
    app = FastAPI(title="Free Route Finder")
    app.include_router(session_router)
    app.include_router(route_router)

    # Per-process state owned here and handed to routes via Depends
    app.state.map_runtime = MapRuntimeLoader(settings)
    app.state.sessions = SessionRepository(map_factory=partial(open_map, app.state.map_runtime))

    # --- Root Endpoint ---
    @app.get("/")
    async def root():
        return {
            "message": "Welcome to Free Route Finder API",
            "status": "running",
            "endpoints": {
                "health": "/health",
                "login": "/login",
                "route": "/route",
                "map": "/map/{session_id}",
                "docs": "/docs"
            },
            "version": "1.0.0"
        }

    # --- Health Check ---
    @app.get("/health")
    async def health_check():
        return {
            "status": "ok",
            "service": "Free Route Finder",
            "map_runtime_loaded": app.state.map_runtime.loaded
        }

    return app

app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True)
