import logging

import uvicorn
from config import ApplicationConfig
from src.api.app import create_app

logger = logging.getLogger(__name__)

app = create_app(ApplicationConfig)

if __name__ == "__main__":
    logger.info(f"Starting invoice API on {ApplicationConfig.API_HOST}:{ApplicationConfig.API_PORT}")
    uvicorn.run(
        "api:app",
        host=ApplicationConfig.API_HOST,
        port=int(ApplicationConfig.API_PORT),
        reload=ApplicationConfig.API_RELOAD,
        log_level=str(ApplicationConfig.LOG_LEVEL).lower(),
    )
