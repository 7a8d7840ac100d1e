import logging
import logging.config
import os

import uvicorn
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.middleware.cors import CORSMiddleware

from healthsync.api.api_router import router
from healthsync.models import Base
from healthsync.db.base import engine
from healthsync.core.config import settings
from healthsync.helpers.exception_handler import (
    CustomException, http_exception_handler, validation_exception_handler
)
from healthsync.services.ws_manager import change_feed

if os.path.exists(settings.LOGGING_CONFIG_FILE):
    logging.config.fileConfig(settings.LOGGING_CONFIG_FILE, disable_existing_loggers=False)

logger = logging.getLogger(__name__)

Base.metadata.create_all(bind=engine)


def get_application() -> FastAPI:
    application = FastAPI(
        title=settings.PROJECT_NAME, docs_url="/docs", redoc_url='/re-docs',
        openapi_url=f"{settings.API_PREFIX}/openapi.json",
        description='''
        Role-based healthcare portal API
            - Sign up / login with JWT
            - Doctor-patient pairing
            - Health logs, messages and checkups scoped by row-level policy
            - WebSocket change feed
        '''
    )
    application.add_middleware(
        CORSMiddleware,
        allow_origins=[str(origin) for origin in settings.BACKEND_CORS_ORIGINS],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.include_router(router, prefix=settings.API_PREFIX)
    application.add_exception_handler(CustomException, http_exception_handler)
    application.add_exception_handler(RequestValidationError, validation_exception_handler)

    @application.get("/health")
    async def health_check():
        return {
            "status": "healthy",
            "services": {
                "database": engine.dialect.name,
                "change_feed": change_feed.get_stats()
            }
        }

    logger.info(f"{settings.PROJECT_NAME} started with {len(application.routes)} routes")
    return application


app = get_application()
if __name__ == '__main__':
    uvicorn.run(app, host="0.0.0.0", port=8000)
