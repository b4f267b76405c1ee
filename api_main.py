from jukebox.api.fastapi_app import app

__all__ = ["app"]
