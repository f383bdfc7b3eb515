# petmatch/routers/pets.py
# Mascotas: alta, listado con filtros/búsqueda/paginación, edición, borrado,
# recientes, mascota del día y galería de imágenes.
from datetime import datetime, timezone
from typing import Any, Dict, Optional
import logging
import math

from fastapi import APIRouter, Depends, Query, Request, status

from ..db import Datastore, get_db
from ..errors import NotFoundError, ValidationError
from ..schemas.pet import PetCreate, PetImageCreate
from ..utils import featured_index, parse_scalar, require_fields, unwrap

logger = logging.getLogger(__name__)

router = APIRouter()

# columnas que se pueden usar como filtro de igualdad en GET /pets
FILTERABLE_FIELDS = {
    "size", "energy", "species", "breed", "gender", "age",
    "good_with_kids", "good_with_dogs", "good_with_cats", "house_trained",
}
SORTABLE_FIELDS = {"name", "age", "size", "energy", "id", "species", "breed"}
RECENT_LIMIT = 10

def _today() -> str:
    return datetime.now(timezone.utc).date().isoformat()

def _age_bound(value: str, param: str) -> float:
    # minAge/maxAge vacíos se ignoran antes de llegar aquí
    try:
        return float(value)
    except ValueError:
        raise ValidationError(f"{param} must be a number.")

@router.post("", status_code=status.HTTP_201_CREATED)
async def create_pet(payload: PetCreate, db: Datastore = Depends(get_db)):
    pet = payload.model_dump(exclude_unset=True)
    require_fields(pet, ("name", "size", "energy"), "name, size, and energy are required fields.")

    result = await db.table("pets").insert(pet).select("*").single().execute()
    return unwrap(result, "Error creating pet")

@router.get("")
async def list_pets(
    request: Request,
    search: Optional[str] = None,
    sort: str = "name",
    order: str = "asc",
    min_age: Optional[str] = Query(None, alias="minAge"),
    max_age: Optional[str] = Query(None, alias="maxAge"),
    page: int = 1,
    limit: int = 20,
    db: Datastore = Depends(get_db),
):
    """
    Lista mascotas con búsqueda por nombre, rango de edad, orden y paginación.
    Cualquier otro query param de FILTERABLE_FIELDS se aplica como igualdad;
    los desconocidos se ignoran.
    """
    if sort not in SORTABLE_FIELDS:
        raise ValidationError(f"Cannot sort by {sort!r}. Use one of: {', '.join(sorted(SORTABLE_FIELDS))}.")

    page = max(1, page)
    limit = max(1, limit)
    offset = (page - 1) * limit

    query = db.table("pets").select("*", count="exact")

    for key, value in request.query_params.items():
        if key not in FILTERABLE_FIELDS:
            continue
        if value != "":
            query = query.eq(key, parse_scalar(value))

    if search:
        query = query.ilike("name", f"%{search}%")
    if min_age:
        query = query.gte("age", _age_bound(min_age, "minAge"))
    if max_age:
        query = query.lte("age", _age_bound(max_age, "maxAge"))

    query = query.order(sort, ascending=order == "asc").range(offset, offset + limit - 1)

    result = await query.execute()
    pets = unwrap(result, "Error fetching pets")
    total = result.count or 0
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "totalPages": math.ceil(total / limit) if total else 1,
        "pets": pets,
    }

@router.get("/recent")
async def recent_pets(db: Datastore = Depends(get_db)):
    """Las 10 mascotas con id más alto (las últimas creadas)."""
    result = await db.table("pets").select("*").order("id", ascending=False).limit(RECENT_LIMIT).execute()
    return unwrap(result, "Error fetching recent pets")

@router.get("/featured")
async def featured_pet(db: Datastore = Depends(get_db)):
    """
    Mascota del día: suma de los códigos de la fecha UTC (YYYY-MM-DD)
    módulo el número de mascotas. Se ordena por id para que la elección
    no cambie durante el día mientras no cambie el conjunto.
    """
    result = await db.table("pets").select("*").order("id").execute()
    pets = unwrap(result, "Error fetching pets for featured")
    index = featured_index(_today(), len(pets))
    if index is None:
        return None
    return pets[index]

@router.get("/{pet_id}")
async def get_pet(pet_id: str, db: Datastore = Depends(get_db)):
    result = await db.table("pets").select("*").eq("id", pet_id).single().execute()
    if result.error is not None:
        logger.error("Error fetching pet by id: %s", result.error)
        raise NotFoundError("Pet not found")
    return result.data

@router.patch("/{pet_id}")
async def update_pet(pet_id: str, payload: Dict[str, Any], db: Datastore = Depends(get_db)):
    result = await db.table("pets").update(payload).eq("id", pet_id).select("*").single().execute()
    return unwrap(result, "Error updating pet")

@router.delete("/{pet_id}")
async def delete_pet(pet_id: str, db: Datastore = Depends(get_db)):
    # el datastore no falla si no había fila: la respuesta es la misma
    result = await db.table("pets").delete().eq("id", pet_id).execute()
    unwrap(result, "Error deleting pet")
    return {"message": "Pet deleted successfully."}

# -------------------- Galería --------------------

@router.get("/{pet_id}/images")
async def list_pet_images(pet_id: str, db: Datastore = Depends(get_db)):
    result = await db.table("pet_images").select("*").eq("pet_id", pet_id).execute()
    return unwrap(result, "Error fetching pet images")

@router.post("/{pet_id}/images", status_code=status.HTTP_201_CREATED)
async def add_pet_image(pet_id: str, payload: PetImageCreate, db: Datastore = Depends(get_db)):
    if not payload.image_url:
        raise ValidationError("image_url is required")

    result = await (
        db.table("pet_images")
        .insert({"pet_id": pet_id, "image_url": payload.image_url})
        .select("*")
        .single()
        .execute()
    )
    return unwrap(result, "Error inserting pet image")
