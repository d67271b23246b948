import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config.settings import API_CONFIG, LOGGING_CONFIG
from routes.document_routes import router as document_router
from routes.error_messages import error_body
from services.pdf_service import PDFService
from shared.template_registry import TemplateRegistry
from utils.errors import DocumentGenerationError
from utils.pdf_utils import ensure_fonts_available, DEFAULT_FONT_NAME

logger = logging.getLogger(__name__)


def create_app(registry: Optional[TemplateRegistry] = None,
               pdf_service: Optional[PDFService] = None) -> FastAPI:
    logging.basicConfig(
        level=LOGGING_CONFIG['level'],
        format=LOGGING_CONFIG['format'],
        handlers=[
            logging.StreamHandler(),
        ]
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Verify fonts at startup"""
        arabic_font = ensure_fonts_available()
        if arabic_font:
            logger.info(f"PDF Fonts: Arabic font {arabic_font}, default font {DEFAULT_FONT_NAME}")
        else:
            logger.warning(f"PDF Fonts: only {DEFAULT_FONT_NAME} available, Arabic documents will lack glyphs")
        problems = app.state.registry.check_defaults()
        for category, issues in problems.items():
            logger.warning(f"Templates: category '{category}': {'; '.join(issues)}")
        yield

    app = FastAPI(
        title=API_CONFIG['title'],
        version=API_CONFIG['version'],
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    registry = registry or TemplateRegistry.from_settings()
    app.state.registry = registry
    app.state.pdf_service = pdf_service or PDFService(registry)

    @app.exception_handler(DocumentGenerationError)
    async def document_error_handler(request: Request, exc: DocumentGenerationError):
        status_code, body = error_body(exc)
        if status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc}")
        else:
            logger.warning(f"{request.method} {request.url.path} rejected: {exc}")
        return JSONResponse(status_code=status_code, content=body)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=API_CONFIG['allowed_origins'],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[
            "Content-Disposition",
            "X-Page-Count",
            "X-Template-Id",
            "X-Template-Version",
            "X-Generated-At",
            "X-Variables-Hash",
        ],
    )

    app.include_router(document_router)

    @app.get("/")
    async def health_root():
        return {"status": "ok", "service": "procurement-documents"}

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", "8000"))
    uvicorn.run("main:app", host="0.0.0.0", port=port, reload=True)
