from pydantic import BaseModel
from typing import Optional

class AdoptionCreate(BaseModel):
    # "status" no forma parte del contrato: toda solicitud nace "pending"
    user_id: Optional[str] = None
    pet_id: Optional[str] = None
    message: Optional[str] = None
