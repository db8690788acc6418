from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.health import router as health_router
from app.api.me import router as me_router
from app.api.root import router as root_router
from app.api.cycles import router as cycles_router
from app.api.forms import router as forms_router
from app.api.responses import router as responses_router
from app.api.results import router as results_router
from app.api.suggestions import router as suggestions_router
from app.api.audit import router as audit_router
from app.core.config import settings
from app.core.errors import FeedbackError
from app.core.logging import configure_logging

configure_logging(settings.LOG_LEVEL)

app = FastAPI(title="Dimensions 360 Feedback")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(FeedbackError)
def feedback_error_handler(request: Request, exc: FeedbackError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.to_detail()})


app.include_router(root_router)
app.include_router(health_router)
app.include_router(me_router)
app.include_router(forms_router)
app.include_router(cycles_router)
app.include_router(responses_router)
app.include_router(results_router)
app.include_router(suggestions_router)
app.include_router(audit_router)
