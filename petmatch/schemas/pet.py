from pydantic import BaseModel, ConfigDict
from typing import Any, Optional

class PetCreate(BaseModel):
    # name/size/energy se validan en la ruta para responder 400 con un mensaje propio;
    # el resto de campos se guardan tal cual
    model_config = ConfigDict(extra="allow")

    name: Optional[Any] = None
    size: Optional[Any] = None
    energy: Optional[Any] = None

class PetImageCreate(BaseModel):
    image_url: Optional[str] = None
