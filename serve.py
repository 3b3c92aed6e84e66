#!/usr/bin/env python3
"""
Hotel Search server launcher.
Starts the FastAPI backend with uvicorn on the configured host and port.
"""

import sys
from pathlib import Path

BACKEND_DIR = Path(__file__).parent / 'backend'
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))


def main():
    import uvicorn
    from api.config import settings
    from api.main import app

    print(f"Starting backend on http://{settings.api_host}:{settings.api_port}")
    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        access_log=True,
        log_config=None,
        timeout_keep_alive=5,
        timeout_graceful_shutdown=5.0,
    )


if __name__ == '__main__':
    main()
