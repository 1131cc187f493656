from __future__ import annotations

from flask import Blueprint, g

from models.schemas.user import UserOutSchema
from utils.decorators import jwt_required
from .errors import success_response

bp = Blueprint("users", __name__)

user_out_schema = UserOutSchema()


@bp.get("/me")
@jwt_required()
def me():
    """
    Get current user info.
    ---
    tags:
      - Users
    security:
      - Bearer: []
    responses:
      200:
        description: OK
      401:
        description: Unauthorized
    """
    return success_response(user_out_schema.dump(g.current_user), "Current user fetched successfully")
