# petmatch/routers/adoption.py
# Solicitudes de adopción: envío y listado por usuario.
from fastapi import APIRouter, Depends, status

from ..db import Datastore, get_db
from ..schemas.adoption import AdoptionCreate
from ..utils import require_fields, unwrap

router = APIRouter()

ADOPTION_COLUMNS = ("id", "user_id", "pet_id", "message", "status", "created_at")

@router.post("", status_code=status.HTTP_201_CREATED)
async def submit_adoption_request(payload: AdoptionCreate, db: Datastore = Depends(get_db)):
    req = payload.model_dump()
    require_fields(req, ("user_id", "pet_id"), "user_id and pet_id are required fields.")
    req["status"] = "pending"  # siempre, venga lo que venga

    result = await db.table("adoption_requests").insert(req).select("*").single().execute()
    return unwrap(result, "Error submitting adoption request")

@router.get("/{user_id}")
async def list_adoption_requests(user_id: str, db: Datastore = Depends(get_db)):
    """Solicitudes del usuario con la mascota embebida, las más nuevas primero."""
    result = await (
        db.table("adoption_requests")
        .select(*ADOPTION_COLUMNS, embed=["pets"])
        .eq("user_id", user_id)
        .order("created_at", ascending=False)
        .execute()
    )
    return unwrap(result, "Error fetching adoption requests")
