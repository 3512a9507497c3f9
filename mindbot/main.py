import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .core.config import settings
from .core.db import engine, Base, SessionLocal
from .core.logging_config import setup_logging
from .services.consultation import seed_psychologists
from .api.routes.misc import router as misc_router
from .api.routes.chat import router as chat_router
from .api.routes.vent import router as vent_router
from .api.routes.toolkit import router as toolkit_router
from .api.routes.line import router as line_router
from .api.routes.consultation import router as consultation_router
from .api.routes.listeners import router as listeners_router
from .api.routes.leads import router as leads_router
from .api.routes.private_chat import router as private_chat_router
from .api.routes.therapists import router as therapists_router
from .api.routes.psychoeducation import router as psychoeducation_router

log = logging.getLogger("mindbot.server")

@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    Base.metadata.create_all(bind=engine)
    with SessionLocal() as db:
        seed_psychologists(db)
    log.info("MindBot API %s starting env=%s provider=%s", settings.API_VERSION, settings.APP_ENV, settings.LLM_PROVIDER)
    yield
    log.info("MindBot API stopping")

app = FastAPI(title="MindBot API", version=settings.API_VERSION, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "OPTIONS"],
    allow_headers=["*"],
)

app.include_router(misc_router)
app.include_router(chat_router)
app.include_router(vent_router)
app.include_router(toolkit_router)
app.include_router(line_router)
app.include_router(consultation_router)
app.include_router(listeners_router)
app.include_router(leads_router)
app.include_router(private_chat_router)
app.include_router(therapists_router)
app.include_router(psychoeducation_router)
