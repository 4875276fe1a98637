import logging
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.responses import PlainTextResponse, Response

from Pastebin.core.config import Settings, get_settings
from Pastebin.core.errors import PasteError
from Pastebin.core.keys import KeyManager
from Pastebin.core.models import HealthResponse
from Pastebin.core.object_store import InMemoryObjectStore, MinioObjectStore, ObjectStore
from Pastebin.core.repositories import PasteRepository, SqlPasteRepository
from Pastebin.core.service import PasteService
from Pastebin.core.storage import get_session_factory, init_db
from Pastebin.core.tiering import TieringPolicy

settings = get_settings()
logger = logging.getLogger("pastebin")
logging.basicConfig(level=settings.LOG_LEVEL, format="%(asctime)s %(levelname)s %(message)s")

app = FastAPI(title=settings.APP_NAME, version=settings.VERSION)

# Without MinIO the large-object tier lives in process memory.
_local_objects = InMemoryObjectStore()


# ---- DI Setup ----
def get_paste_repository() -> PasteRepository:
    return SqlPasteRepository(get_session_factory())


def get_object_store(settings: Settings = Depends(get_settings)) -> ObjectStore:
    if settings.USE_MINIO:
        return MinioObjectStore(settings)
    return _local_objects


def get_paste_service(
    records: PasteRepository = Depends(get_paste_repository),
    objects: ObjectStore = Depends(get_object_store),
    settings: Settings = Depends(get_settings),
) -> PasteService:
    tiering = TieringPolicy(records=records, objects=objects, settings=settings)
    return PasteService(tiering=tiering, keys=KeyManager(settings), settings=settings)


def get_client_ip(request: Request, settings: Settings = Depends(get_settings)) -> Optional[str]:
    forwarded = request.headers.get(settings.CLIENT_IP_HEADER)
    if forwarded:
        return forwarded.strip()
    return request.client.host if request.client else None


@app.on_event("startup")
async def startup_event() -> None:
    await init_db()


# ---- API Endpoints ----
@app.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse(status="ok", service=settings.APP_NAME, version=settings.VERSION)


async def _upload(request: Request, key: Optional[str], service: PasteService, client_ip: Optional[str]) -> Response:
    url = await service.upload(
        body=await request.body(),
        content_type=request.headers.get("content-type", ""),
        client_ip=client_ip,
        key=key,
    )
    return PlainTextResponse(url)


@app.post("/")
async def create_paste(
    request: Request,
    service: PasteService = Depends(get_paste_service),
    client_ip: Optional[str] = Depends(get_client_ip),
) -> Response:
    return await _upload(request, None, service, client_ip)


@app.post("/{key}")
async def create_paste_with_key(
    key: str,
    request: Request,
    service: PasteService = Depends(get_paste_service),
    client_ip: Optional[str] = Depends(get_client_ip),
) -> Response:
    return await _upload(request, key, service, client_ip)


@app.get("/{key}")
async def read_paste(key: str, service: PasteService = Depends(get_paste_service)) -> Response:
    rendered = await service.retrieve(key)
    return Response(content=rendered.body, media_type=rendered.media_type)


@app.delete("/{key}")
async def delete_paste(
    key: str,
    service: PasteService = Depends(get_paste_service),
    client_ip: Optional[str] = Depends(get_client_ip),
) -> Response:
    return PlainTextResponse(await service.delete(key, client_ip))


@app.exception_handler(PasteError)
async def paste_error_handler(request: Request, exc: PasteError) -> Response:
    if exc.status_code >= 500:
        logger.error("Backend failure on %s: %s", request.url.path, exc.detail, exc_info=exc)
    return PlainTextResponse(exc.detail, status_code=exc.status_code)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> Response:
    logger.error("Unhandled error: %s", exc, exc_info=True)
    return PlainTextResponse("Internal server error", status_code=500)
