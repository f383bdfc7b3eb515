from pydantic import BaseModel
from typing import Optional

class TagCreate(BaseModel):
    name: Optional[str] = None

class TagAssign(BaseModel):
    pet_id: Optional[str] = None
    tag_id: Optional[str] = None
