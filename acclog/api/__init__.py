"""HTTP API for the accomplishment journal"""

from __future__ import annotations


def main() -> None:
    """Run the API with uvicorn (console script: acclog-api)."""
    import uvicorn
    from dotenv import load_dotenv

    from acclog.infrastructure.settings import API_HOST, API_PORT, DEBUG

    load_dotenv()
    uvicorn.run(
        "acclog.api.app:create_app",
        factory=True,
        host=API_HOST,
        port=API_PORT,
        reload=DEBUG,
    )
