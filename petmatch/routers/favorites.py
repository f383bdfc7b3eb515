# petmatch/routers/favorites.py
# Favoritos de un usuario: alta, listado (con la mascota embebida), borrado y nota.

from fastapi import APIRouter, Depends, status

from ..db import Datastore, get_db
from ..schemas.favorite import FavoriteCreate, FavoriteNotePatch
from ..utils import require_fields, unwrap

router = APIRouter()

FAVORITE_COLUMNS = ("id", "user_id", "pet_id", "note", "created_at")

@router.post("", status_code=status.HTTP_201_CREATED)
async def add_favorite(payload: FavoriteCreate, db: Datastore = Depends(get_db)):
    fav = payload.model_dump()
    require_fields(fav, ("user_id", "pet_id"), "user_id and pet_id are required fields.")

    result = await db.table("favorites").insert(fav).select("*").single().execute()
    return unwrap(result, "Error inserting favorite")

@router.get("/{user_id}")
async def list_favorites(user_id: str, db: Datastore = Depends(get_db)):
    result = await (
        db.table("favorites")
        .select(*FAVORITE_COLUMNS, embed=["pets"])
        .eq("user_id", user_id)
        .execute()
    )
    return unwrap(result, "Error fetching favorites")

@router.delete("/{favorite_id}")
async def remove_favorite(favorite_id: str, db: Datastore = Depends(get_db)):
    result = await db.table("favorites").delete().eq("id", favorite_id).execute()
    unwrap(result, "Error deleting favorite")
    return {"message": "Favorite removed successfully."}

@router.patch("/{favorite_id}")
async def update_favorite_note(favorite_id: str, payload: FavoriteNotePatch, db: Datastore = Depends(get_db)):
    result = await (
        db.table("favorites")
        .update({"note": payload.note})
        .eq("id", favorite_id)
        .select("*")
        .single()
        .execute()
    )
    return unwrap(result, "Error updating favorite note")
