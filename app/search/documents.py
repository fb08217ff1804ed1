"""Item documents - the shape stores return to the pipeline and Elasticsearch indexes."""

from typing import Any

from app.db.models.item import Item


def _isoformat(value) -> str | None:
    return value.isoformat() if value is not None else None


def owner_to_doc(owner) -> dict[str, Any] | None:
    if owner is None:
        return None
    return {"id": owner.id, "full_name": owner.full_name, "email": owner.email}


def item_to_doc(item: Item) -> dict[str, Any]:
    """Convert ORM model to a search document. Owner must already be loaded."""
    point = [item.longitude, item.latitude] if item.latitude is not None and item.longitude is not None else None
    return {
        "id": item.id,
        "title": item.title,
        "description": item.description or "",
        "category": item.category,
        "condition": item.condition,
        "location": item.location or "",
        "coordinates": {
            "type": "Point",
            "coordinates": point,
            "enabled": bool(item.coordinates_enabled and point),
        },
        "available": item.available,
        "moderation_status": item.moderation_status,
        "owner": owner_to_doc(item.owner),
        "created_at": _isoformat(item.created_at),
        "updated_at": _isoformat(item.updated_at),
    }
