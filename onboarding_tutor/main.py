import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from onboarding_tutor.api.curriculum import router as curriculum_router
from onboarding_tutor.api.profile import router as profile_router
from onboarding_tutor.api.quiz import router as quiz_router
from onboarding_tutor.api.routes import router
from onboarding_tutor.config import settings

# Configure logging from settings
logging.basicConfig(level=settings.log_level)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    # Startup: Code that runs when the app starts
    logging.info("=" * 60)
    logging.info(f"🚀 {settings.app_name} starting up...")
    logging.info("=" * 60)

    # App Settings
    logging.info("📋 App Configuration:")
    logging.info(f"  Environment: {settings.environment}")
    logging.info(f"  Debug mode: {settings.debug}")
    logging.info(f"  Log level: {settings.log_level}")

    # Server Settings
    logging.info("🌐 Server Configuration:")
    logging.info(f"  Host: {settings.host}")
    logging.info(f"  Port: {settings.port}")
    logging.info(f"  CORS Origins: {settings.cors_origins}")

    # Workspace Settings
    logging.info("📁 Workspace Configuration:")
    logging.info(
        f"  Workspace root: {settings.workspace_root if settings.workspace_root else '✗ Not set'}"
    )
    logging.info(f"  State directory: {settings.state_dir_name}")
    logging.info(f"  Content language: {settings.content_language}")

    # LLM Settings
    logging.info("🤖 LLM Configuration:")
    logging.info(f"  Groq API: {'✓ Configured' if settings.groq_api_key else '✗ Not set'}")
    logging.info(f"  Groq Model: {settings.groq_model}")
    logging.info(f"  LLM Timeout: {settings.llm_timeout}s")

    logging.info("=" * 60)
    logging.info("✅ Startup complete - Ready to accept requests")
    logging.info("=" * 60)

    yield  # App runs here

    logging.info("=" * 60)
    logging.info("🛑 App is shutting down...")
    logging.info("=" * 60)


app = FastAPI(title=settings.app_name, debug=settings.debug, lifespan=lifespan)

# Add CORS middleware - configured from settings
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router, prefix="/api")
app.include_router(curriculum_router, prefix="/api/curriculum", tags=["curriculum"])
app.include_router(quiz_router, prefix="/api/quiz", tags=["quiz"])
app.include_router(profile_router, prefix="/api/profile", tags=["profile"])
