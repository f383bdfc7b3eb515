# petmatch/routers/tags.py
# Etiquetas y su asignación a mascotas.
from fastapi import APIRouter, Depends, status

from ..db import Datastore, get_db
from ..errors import ValidationError
from ..schemas.tag import TagAssign, TagCreate
from ..utils import require_fields, unwrap

router = APIRouter()

@router.get("")
async def list_tags(db: Datastore = Depends(get_db)):
    result = await db.table("tags").select("*").execute()
    return unwrap(result, "Error fetching tags")

@router.post("", status_code=status.HTTP_201_CREATED)
async def create_tag(payload: TagCreate, db: Datastore = Depends(get_db)):
    if not payload.name:
        raise ValidationError("Tag name is required.")

    result = await db.table("tags").insert({"name": payload.name}).select("*").single().execute()
    return unwrap(result, "Error creating tag")

@router.post("/assign", status_code=status.HTTP_201_CREATED)
async def assign_tag(payload: TagAssign, db: Datastore = Depends(get_db)):
    # sin unicidad: asignar dos veces crea dos filas
    row = payload.model_dump()
    require_fields(row, ("pet_id", "tag_id"), "pet_id and tag_id are required.")

    result = await db.table("pet_tags").insert(row).select("*").single().execute()
    return unwrap(result, "Error assigning tag")

@router.get("/pet/{pet_id}")
async def list_pet_tags(pet_id: str, db: Datastore = Depends(get_db)):
    result = await (
        db.table("pet_tags")
        .select("id", "pet_id", "tag_id", embed=["tags"])
        .eq("pet_id", pet_id)
        .execute()
    )
    return unwrap(result, "Error fetching pet tags")
