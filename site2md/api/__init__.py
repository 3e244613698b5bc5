"""FastAPI HTTP layer package.

Run with::

    uvicorn site2md.api:app
"""

from site2md.api.app import create_app

app = create_app()

__all__ = ["app", "create_app"]
