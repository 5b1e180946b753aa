# certregistry/main.py
import logging
from typing import Dict, List, Optional

from apscheduler.schedulers import SchedulerAlreadyRunningError, SchedulerNotRunningError
from fastapi import Depends, FastAPI, File, Form, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import certificates, roles
from .content_store import get_content_store
from .crud import init_db
from .errors import RegistryError, guard
from .schemas import CertificateOut, MessageOut, RoleIn, RoleOut, TitleResponse, UploadResponse
from .settings import settings
from .tasks import scheduler
from .uploads import staged_upload

log = logging.getLogger("gateway")

app = FastAPI(title="Certificate Registry Gateway")
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def startup():
    logging.basicConfig(level=settings.LOG_LEVEL)
    init_db()
    if settings.SCHEDULER_ENABLED:
        try:
            scheduler.start()
        except SchedulerAlreadyRunningError:
            # dev reload keeps the module-level scheduler alive
            log.info("Upload sweep scheduler already running")


@app.on_event("shutdown")
def shutdown():
    try:
        scheduler.shutdown(wait=False)
    except SchedulerNotRunningError:
        pass


@app.exception_handler(RegistryError)
async def registry_error_handler(request: Request, exc: RegistryError):
    operation = exc.operation or request.url.path
    if exc.status_code >= 500:
        log.error("%s: %s", operation, exc.message)
    else:
        log.warning("%s: %s", operation, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    log.warning("%s: %s %s", request.url.path, exc.status_code, exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)}, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    log.warning("%s: malformed request: %s", request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={"error": "Malformed request"})


@app.get("/health")
def health():
    return {"status": "ok", "service": "certificate-registry"}


# ---------- CERTIFICATES ----------
@app.get("/certificados", response_model=List[CertificateOut])
def list_certificates_endpoint():
    with guard("list_certificates", "Error fetching certificates"):
        return certificates.list_certificates()


@app.delete("/eliminar-certificado/{cert_id}", response_model=MessageOut)
def delete_certificate_endpoint(cert_id: int):
    with guard("delete_certificate", "Error deleting certificate"):
        certificates.delete_certificate(cert_id)
    return {"message": "Certificate deleted"}


@app.post("/subir-certificado", response_model=UploadResponse)
def upload_certificate(
    file: Optional[UploadFile] = File(None),
    wallet: Optional[str] = Form(None),
    store=Depends(get_content_store),
):
    """
    Accepts a PDF upload for a wallet, stages it in a temporary file, pins it
    to the content store unless the same bytes are already registered, and
    returns the content id and sha256 content hash.
    """
    with guard("upload_certificate", "Error uploading certificate"):
        with staged_upload(file) as data:
            result = certificates.submit(data, wallet, file.filename if file else None, store)
    return {"message": "Certificate uploaded", **result}


@app.post("/guardar-titulo", response_model=TitleResponse)
def save_title(
    file: Optional[UploadFile] = File(None),
    wallet: Optional[str] = Form(None),
    claimed_hash: Optional[str] = Form(None, alias="hash"),
    store=Depends(get_content_store),
):
    """
    Same registration as /subir-certificado for clients that hash the file
    themselves. The supplied hash has to match the server's digest.
    """
    with guard("save_title", "Internal error saving title"):
        with staged_upload(file) as data:
            result = certificates.submit_with_hash(data, wallet, file.filename if file else None, claimed_hash, store)
    return {"message": "Title saved", "content_id": result["content_id"]}


# ---------- ROLES ----------
@app.post("/guardar-rol", response_model=MessageOut)
def save_role(payload: RoleIn):
    with guard("save_role", "Error saving role"):
        roles.upsert_role(payload.wallet, payload.role)
    return {"message": "Role saved"}


@app.delete("/eliminar-rol/{wallet}", response_model=MessageOut)
def delete_role_endpoint(wallet: str):
    with guard("delete_role", "Error deleting role"):
        roles.delete_role(wallet)
    return {"message": "Role deleted"}


@app.get("/roles/{wallet}", response_model=RoleOut)
def get_role_endpoint(wallet: str):
    with guard("get_role", "Internal error"):
        role = roles.get_role(wallet)
    return {"wallet": wallet.strip(), "role": role}


@app.get("/listar-roles", response_model=Dict[str, str])
def list_roles_endpoint():
    with guard("list_roles", "Error loading roles"):
        return roles.list_roles()
