import uuid
from datetime import datetime
from pydantic import BaseModel


class AccessLogRead(BaseModel):
    model_config = {"from_attributes": True}
    id: int
    drawing_id: uuid.UUID
    actor: str
    action: str
    ip_address: str | None
    user_agent: str | None
    accessed_at: datetime
