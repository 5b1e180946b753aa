# certregistry/models.py
from typing import Optional
from sqlmodel import SQLModel, Field
from datetime import datetime, timezone

class Certificate(SQLModel, table=True):
    __tablename__ = "certificates"

    id: Optional[int] = Field(default=None, primary_key=True)
    owner_wallet: str = Field(index=True)
    file_name: str | None = None
    # sha256 hex of the file bytes; unique so concurrent identical uploads cannot both land
    content_hash: str = Field(unique=True, index=True)
    content_id: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

class WalletRole(SQLModel, table=True):
    __tablename__ = "wallet_roles"

    wallet: str = Field(primary_key=True)
    role: str
