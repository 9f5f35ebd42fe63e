"""Run script for the portal API"""

import uvicorn

from portal.app.config import settings

if __name__ == "__main__":
    host = settings.APP_HOST
    port = settings.APP_PORT
    debug = settings.DEBUG

    print(f"Starting {settings.SERVICE_NAME} on {host}:{port}")
    print(f"Debug mode: {debug}")
    print(f"Storage root: {settings.storage_root_path}")

    uvicorn.run(
        "portal.app.main:app",
        host=host,
        port=port,
        reload=debug,
        log_level="info"
    )
