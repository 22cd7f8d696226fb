from livesync.api.http.health import router as health_router
from livesync.api.http.methods import router as methods_router
from livesync.api.http.publications import router as publications_router

__all__ = [
    "health_router",
    "methods_router",
    "publications_router",
]
