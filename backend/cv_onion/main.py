import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, File, Form, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from cv_onion.actions import Actions
from cv_onion.core import (
    MAX_FILE_BYTES,
    AnalyzeCvInput,
    AnalyzeCvOutput,
    AnalyzeJobDescriptionInput,
    AnalyzeJobDescriptionOutput,
    MatchCvToJobInput,
    MatchCvToJobOutput,
)
from cv_onion.exceptions import ActionError
from cv_onion.llm import GeminiBackend, ModelBackend
from cv_onion.log import configure_logging
from cv_onion.services.render import render_page
from cv_onion.session import MatchSession, Upload
from cv_onion.settings import API_DESCRIPTION, API_TITLE, API_VERSION, Settings, get_settings

logger = logging.getLogger(__name__)


def get_actions(request: Request) -> Actions:
    return request.app.state.actions


def create_app(backend: Optional[ModelBackend] = None, settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(API_TITLE, settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if app.state.actions is None:
            app.state.actions = Actions(GeminiBackend.from_settings(settings))
            logger.info("Gemini backend ready (model=%s)", settings.gemini_model_name)
        yield

    limiter = Limiter(
        key_func=get_remote_address,
        default_limits=[settings.rate_limit] if settings.is_prod else [],
    )

    rate_limit = limiter.limit(settings.rate_limit) if settings.is_prod else (lambda fn: fn)

    app = FastAPI(title=API_TITLE, description=API_DESCRIPTION, version=API_VERSION, lifespan=lifespan)
    app.state.settings = settings
    app.state.actions = Actions(backend) if backend is not None else None
    app.state.limiter = limiter
    app.add_middleware(SlowAPIMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RateLimitExceeded)
    def rate_limit_handler(request: Request, exc: RateLimitExceeded):
        return JSONResponse(
            status_code=429,
            content={"status": False, "message": f"Rate limit exceeded: {settings.rate_limit} per IP."},
        )

    @app.exception_handler(ActionError)
    def action_error_handler(request: Request, exc: ActionError):
        return JSONResponse(status_code=502, content={"status": False, "message": str(exc)})

    @app.get("/health", tags=["default"])
    def health():
        return {"ok": True, "env": settings.env, "rate_limit_enabled": settings.is_prod}

    @app.post("/api/analyze-cv", response_model=AnalyzeCvOutput, tags=["actions"])
    @rate_limit
    async def analyze_cv(request: Request, body: AnalyzeCvInput, actions: Actions = Depends(get_actions)):
        return await actions.analyze_cv(body)

    @app.post("/api/analyze-job-description", response_model=AnalyzeJobDescriptionOutput, tags=["actions"])
    @rate_limit
    async def analyze_job_description(
        request: Request,
        body: AnalyzeJobDescriptionInput,
        actions: Actions = Depends(get_actions),
    ):
        return await actions.analyze_job_description(body)

    @app.post("/api/match-cv-to-job", response_model=MatchCvToJobOutput, tags=["actions"])
    @rate_limit
    async def match_cv_to_job(request: Request, body: MatchCvToJobInput, actions: Actions = Depends(get_actions)):
        return await actions.match_cv_to_job(body)

    @app.get("/", response_class=HTMLResponse, tags=["ui"])
    def index(actions: Actions = Depends(get_actions)):
        return render_page(MatchSession(actions))

    @app.post("/", response_class=HTMLResponse, tags=["ui"])
    @rate_limit
    async def submit(
        request: Request,
        job_description: Optional[str] = Form(None),
        cv_file: Optional[UploadFile] = File(None),
        actions: Actions = Depends(get_actions),
    ):
        upload = None
        if cv_file is not None and cv_file.filename:
            data = await cv_file.read(MAX_FILE_BYTES + 1)
            await cv_file.close()
            upload = Upload(filename=cv_file.filename, content_type=cv_file.content_type or "", data=data)

        session = MatchSession(actions)
        await session.submit(job_description, upload)
        return render_page(session)

    return app


app = create_app()
