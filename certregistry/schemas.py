# certregistry/schemas.py
from datetime import datetime
from pydantic import BaseModel, ConfigDict
from typing import Optional

class CertificateOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    owner_wallet: str
    file_name: Optional[str]
    content_hash: str
    content_id: str
    created_at: datetime

class UploadResponse(BaseModel):
    message: str
    content_id: str
    content_hash: str

class TitleResponse(BaseModel):
    message: str
    content_id: str

# fields optional so missing values come back as 400 from the role registry, not 422
class RoleIn(BaseModel):
    wallet: Optional[str] = None
    role: Optional[str] = None

class RoleOut(BaseModel):
    wallet: str
    role: str

class MessageOut(BaseModel):
    message: str
