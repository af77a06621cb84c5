from __future__ import annotations

import uvicorn

from tracker.config import load_settings
from tracker.logging_setup import setup_logging
from tracker.presentation.http.app import create_app

settings = load_settings()
setup_logging(log_dir=settings.log_dir, console_level=settings.log_level)

app = create_app(settings=settings)


if __name__ == "__main__":
    # reload needs the import string, not the app object
    uvicorn.run(
        "main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=True,
    )
