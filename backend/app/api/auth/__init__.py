from backend.app.api.auth.router import router

__all__ = ["router"]
