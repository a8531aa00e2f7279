import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, Form, HTTPException, Request
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException

from leaderboard_service.config import ADMIN_PASSWORD, LEADERBOARD_BUCKET, LEADERBOARD_KEY
from leaderboard_service.errors import InvalidEntryError, StoreError
from leaderboard_service.models import Leaderboard, SubmitIn, SubmitOut
from leaderboard_service.object_store import build_object_store
from leaderboard_service.store import LeaderboardStore

logger = logging.getLogger(__name__)

TEMPLATES_DIR = os.path.join(os.path.dirname(__file__), "templates")
templates = Jinja2Templates(directory=TEMPLATES_DIR)

router = APIRouter()


def get_store(request: Request) -> LeaderboardStore:
    return request.app.state.store


def require_admin(request: Request, password: Optional[str]) -> None:
    if password != request.app.state.admin_password:
        raise HTTPException(401, "Unauthorized")


def _submit_failed(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=SubmitOut(success=False, message=message).model_dump())


# --------- Pages ----------
@router.get("/", response_class=HTMLResponse)
def index(request: Request, store: LeaderboardStore = Depends(get_store)):
    return templates.TemplateResponse(request, "index.html", {"users": store.snapshot()})


@router.post("/")
def submit_form(
    request: Request,
    username: Optional[str] = Form(None),
    score: Optional[str] = Form(None),
    time: Optional[str] = Form(None),
    difficulty: Optional[str] = Form(None),
    store: LeaderboardStore = Depends(get_store),
):
    try:
        store.submit(username, score, time, difficulty, strict=True)
    except InvalidEntryError as e:
        return templates.TemplateResponse(
            request, "index.html", {"users": store.snapshot(), "error": str(e)}, status_code=400
        )
    except StoreError:
        raise HTTPException(500, "Internal Server Error")
    return RedirectResponse("/users", status_code=303)


@router.get("/users", response_class=HTMLResponse)
def users(request: Request, store: LeaderboardStore = Depends(get_store)):
    return templates.TemplateResponse(request, "users.html", {"users": store.snapshot()})


@router.get("/raw", response_model=Leaderboard)
def raw(refresh: bool = False, store: LeaderboardStore = Depends(get_store)):
    if refresh:
        store.load()
    return Leaderboard(users=list(store.snapshot()))


# --------- JSON submission (game clients) ----------
@router.post("/submit", response_model=SubmitOut)
async def submit_json(request: Request, store: LeaderboardStore = Depends(get_store)):
    try:
        payload = SubmitIn.model_validate_json(await request.body())
    except ValidationError:
        return _submit_failed("Invalid input.", 400)

    try:
        await run_in_threadpool(
            store.submit, payload.username, payload.score, payload.time, payload.difficulty, strict=True
        )
    except InvalidEntryError as e:
        return _submit_failed(f"Invalid input: {e}", 400)
    except StoreError:
        return _submit_failed("Failed to save leaderboard.", 500)
    return SubmitOut(success=True, message="Data submitted successfully.")


# --------- Admin ----------
@router.get("/add", response_class=HTMLResponse)
def add_form(request: Request):
    return templates.TemplateResponse(request, "add.html", {})


@router.post("/add", response_class=PlainTextResponse)
def add_user(
    request: Request,
    password: Optional[str] = Form(None),
    username: Optional[str] = Form(None),
    score: Optional[str] = Form(None),
    time: Optional[str] = Form(None),
    difficulty: Optional[str] = Form(None),
    store: LeaderboardStore = Depends(get_store),
):
    require_admin(request, password)
    try:
        store.submit(username, score, time, difficulty)
    except InvalidEntryError as e:
        raise HTTPException(400, f"Invalid input: {e}")
    except StoreError:
        raise HTTPException(500, "Internal Server Error")
    return "User added successfully."


@router.get("/erase", response_class=HTMLResponse)
def erase_form(request: Request):
    return templates.TemplateResponse(request, "erase.html", {})


@router.post("/erase", response_class=PlainTextResponse)
def erase(
    request: Request,
    password: Optional[str] = Form(None),
    store: LeaderboardStore = Depends(get_store),
):
    require_admin(request, password)
    try:
        store.clear()
    except StoreError:
        raise HTTPException(500, "Internal Server Error")
    return "Data erased."


async def _plain_http_error(request: Request, exc: StarletteHTTPException):
    return PlainTextResponse(str(exc.detail), status_code=exc.status_code, headers=getattr(exc, "headers", None))


def create_app(store: Optional[LeaderboardStore] = None, admin_password: str = ADMIN_PASSWORD) -> FastAPI:
    if store is None:
        store = LeaderboardStore(build_object_store(), LEADERBOARD_BUCKET, LEADERBOARD_KEY)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # best effort: a failed load leaves the board empty
        await run_in_threadpool(store.load)
        yield

    app = FastAPI(title="Minesweeper Leaderboard", lifespan=lifespan)
    app.state.store = store
    app.state.admin_password = admin_password

    app.add_exception_handler(StarletteHTTPException, _plain_http_error)
    app.include_router(router)
    return app
