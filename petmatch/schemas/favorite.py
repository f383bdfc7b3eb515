from pydantic import BaseModel
from typing import Optional

class FavoriteCreate(BaseModel):
    user_id: Optional[str] = None
    pet_id: Optional[str] = None
    note: Optional[str] = None

class FavoriteNotePatch(BaseModel):
    note: Optional[str] = None
