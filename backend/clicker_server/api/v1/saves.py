"""Save data endpoints (opaque blob, one per user)."""

from __future__ import annotations

from uuid import UUID

from flask import Blueprint, request

from clicker_server.api.deps import current_user_id, json_response, require_access_token, timing
from clicker_server.schemas import SaveInSchema, SaveSchema
from clicker_server.services import SaveCreateIn, SaveService, SaveUpdateIn

bp = Blueprint("saves", __name__)

save_in_schema = SaveInSchema()
save_schema = SaveSchema()


@bp.post("")
@require_access_token
@timing
def create_save():
    """Create the caller's save."""

    data = save_in_schema.load(request.get_json(silent=True) or {})
    save = SaveService().create(SaveCreateIn(user_id=current_user_id(), savedata=data["savedata"]))
    return json_response(save_schema.dump(save), status=201)


@bp.get("/<uuid:save_id>")
@timing
def get_save(save_id: UUID):
    """Return a save by id."""

    return json_response(save_schema.dump(SaveService().get(save_id)))


@bp.put("/<uuid:save_id>")
@require_access_token
@timing
def update_save(save_id: UUID):
    """Overwrite the caller's save."""

    data = save_in_schema.load(request.get_json(silent=True) or {})
    save = SaveService().update(
        SaveUpdateIn(save_id=save_id, user_id=current_user_id(), savedata=data["savedata"])
    )
    return json_response(save_schema.dump(save))
