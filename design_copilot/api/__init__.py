"""HTTP layer: FastAPI router, schemas and middleware."""

from design_copilot.api.routes import router

__all__ = ["router"]
