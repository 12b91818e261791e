import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from f1gpt.api.routes import GENERIC_ERROR
from f1gpt.api.routes import router as api_router
from f1gpt.config import load_settings, public_settings, setup_logging
from f1gpt.services import ServiceContainer, build_services


def create_app(services: ServiceContainer | None = None) -> FastAPI:
    """
    Build the API. Settings are validated and clients constructed here, at startup,
    so a missing deployment value stops the process before the first request.
    """
    logger = setup_logging()
    if services is None:
        settings = load_settings()
        logger.info("Loaded settings: %s", public_settings(settings))
        services = build_services(settings)

    app = FastAPI(title="F1GPT")
    app.state.services = services

    # the chat UI is served from another origin
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        # detail stays in the logs
        logger.error("Request validation failed", extra={"path": request.url.path, "errors": exc.errors()})
        return JSONResponse(status_code=500, content=GENERIC_ERROR)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error", extra={"path": request.url.path})
        return JSONResponse(status_code=500, content=GENERIC_ERROR)

    app.include_router(api_router)
    logger.info("Application starting")
    return app


def main() -> None:
    logger = setup_logging()
    settings = load_settings()
    logger.info("Loaded settings: %s", public_settings(settings))
    uvicorn.run(create_app(build_services(settings)), host=settings.app_host, port=settings.app_port)


if __name__ == "__main__":
    main()
