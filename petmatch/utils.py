# petmatch/utils.py
from typing import Any, Dict, Iterable, Optional
import logging
from bson import ObjectId
from datetime import datetime

from .errors import ValidationError

logger = logging.getLogger(__name__)

def to_id(doc: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Convierte _id -> id y deja el documento listo para JSON:
    ObjectIds a string y datetimes a ISO, también en subdocumentos y listas.
    Si doc es None, devuelve {}.
    """
    if doc is None:
        return {}
    d = dict(doc)

    if "_id" in d:
        d["id"] = str(d.pop("_id"))

    for key, value in d.items():
        if isinstance(value, ObjectId):
            d[key] = str(value)
        elif isinstance(value, datetime):
            d[key] = value.isoformat()
        elif isinstance(value, dict):
            d[key] = to_id(value)
        elif isinstance(value, list):
            d[key] = [
                str(item) if isinstance(item, ObjectId)
                else item.isoformat() if isinstance(item, datetime)
                else to_id(item) if isinstance(item, dict)
                else item
                for item in value
            ]

    return d

# ==================== Validación ====================

def require_fields(payload: Dict[str, Any], fields: Iterable[str], message: str) -> None:
    """Lanza ValidationError si algún campo falta o viene vacío."""
    if any(not payload.get(f) for f in fields):
        raise ValidationError(message)

def parse_scalar(value: str) -> Any:
    """Convierte el texto de un query param a bool/int/float cuando procede."""
    lowered = value.strip().lower()
    if lowered in ("true", "false"):
        return lowered == "true"
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        return value

# ==================== Resultados del datastore ====================

def unwrap(result, context: str) -> Any:
    """
    Devuelve result.data o, si el datastore informó de un error,
    lo registra con el contexto de la ruta y lo lanza como StoreError.
    """
    if result.error is not None:
        logger.error("%s: %s", context, result.error)
        raise result.error
    return result.data

# ==================== Mascota del día ====================

def featured_index(day: str, total: int) -> Optional[int]:
    """Suma de los códigos de carácter de 'YYYY-MM-DD' módulo el número de mascotas."""
    if total <= 0:
        return None
    return sum(ord(ch) for ch in day) % total
