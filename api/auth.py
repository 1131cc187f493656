"""
Authentication blueprint:
- POST /auth/register
- POST /auth/login
- POST /auth/refresh
- POST /auth/logout
- POST /auth/change-password

The implementation:
- Uses argon2 for password hashing (via utils.security)
- Issues short-lived access tokens and longer-lived refresh tokens (JWTs signed with HS256)
- Keeps the single current refresh token per user in the session store so
  logout revokes it and every refresh rotates it
- Sets both tokens as HttpOnly, Secure cookies as well as returning them in the body
"""
from __future__ import annotations

import logging
import os
import uuid

from flask import Blueprint, request, g, current_app
from werkzeug.utils import secure_filename

from models.schemas.user import (
    UserCreateSchema,
    UserOutSchema,
    UserLoginSchema,
    PasswordChangeSchema,
)
from utils.decorators import ACCESS_COOKIE, jwt_required
from utils.exceptions import ConflictError, DependencyError, ValidationError
from .errors import success_response

REFRESH_COOKIE = "refreshToken"
REQUIRED_FIELDS = ("fullName", "email", "username", "password")

logger = logging.getLogger(__name__)

bp = Blueprint("auth", __name__)

user_create_schema = UserCreateSchema()
user_out_schema = UserOutSchema()
user_login_schema = UserLoginSchema()
password_change_schema = PasswordChangeSchema()


def _manager():
    return current_app.extensions["auth_manager"]


def _cookie_options() -> dict:
    return {"httponly": True, "secure": current_app.config.get("COOKIE_SECURE", True)}


def _set_token_cookies(response, tokens):
    opts = _cookie_options()
    response.set_cookie(
        ACCESS_COOKIE, tokens.access_token,
        max_age=int(current_app.config["ACCESS_TOKEN_EXPIRES"].total_seconds()), **opts
    )
    response.set_cookie(
        REFRESH_COOKIE, tokens.refresh_token,
        max_age=int(current_app.config["REFRESH_TOKEN_EXPIRES"].total_seconds()), **opts
    )
    return response


def _stage_upload(file_storage) -> str:
    """Save an uploaded file under UPLOAD_FOLDER and return its local path."""
    folder = current_app.config["UPLOAD_FOLDER"]
    os.makedirs(folder, exist_ok=True)
    name = secure_filename(file_storage.filename or "") or "upload"
    path = os.path.join(folder, f"{uuid.uuid4().hex}-{name}")
    file_storage.save(path)
    return path


def _uploaded_file(field: str):
    f = request.files.get(field)
    if f is None or not f.filename:
        return None
    return f


@bp.post("/register")
def register():
    """
    Register a new user with an avatar and an optional cover image.
    ---
    tags:
      - Auth
    consumes:
      - multipart/form-data
    parameters:
      - { in: formData, name: fullName, type: string, required: true }
      - { in: formData, name: email, type: string, required: true }
      - { in: formData, name: username, type: string, required: true }
      - { in: formData, name: password, type: string, required: true }
      - { in: formData, name: avatar, type: file, required: true }
      - { in: formData, name: coverImage, type: file, required: false }
    responses:
      201:
        description: Created
      400:
        description: Missing field or avatar
      409:
        description: Username or email already registered
    """
    form = request.form.to_dict()
    if any(not (form.get(key) or "").strip() for key in REQUIRED_FIELDS):
        raise ValidationError("All fields are required")
    data = user_create_schema.load(form)

    profiles = current_app.extensions["profile_store"]
    if profiles.exists(username=data["username"], email=data["email"]):
        raise ConflictError("User already exists")

    avatar_file = _uploaded_file("avatar")
    if avatar_file is None:
        raise ValidationError("Avatar file is required")

    uploader = current_app.extensions["media_uploader"]
    try:
        avatar_url = uploader.upload(_stage_upload(avatar_file))
    except DependencyError:
        raise ValidationError("Error while uploading avatar")

    cover_url = ""
    cover_file = _uploaded_file("coverImage")
    if cover_file is not None:
        try:
            cover_url = uploader.upload(_stage_upload(cover_file))
        except DependencyError:
            # the cover image is optional; register without it
            logger.warning("Cover image upload failed for %s", data["username"])

    user = profiles.create(
        data["password"],
        current_app.extensions["password_hasher"],
        username=data["username"],
        email=data["email"],
        full_name=data["full_name"],
        avatar=avatar_url,
        cover_image=cover_url,
    )
    logger.info("Registered user %s", user.id)
    return success_response(user_out_schema.dump(user), "User registered successfully", 201)


@bp.post("/login")
def login():
    """
    Login with username or email: returns the user, accessToken and refreshToken
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             username: { type: string }
             email: { type: string }
             password: { type: string }
    responses:
      200:
        description: OK (returns tokens, sets cookies)
      400:
        description: Username or email missing
      401:
        description: Invalid credentials
      404:
        description: Unknown user
    """
    payload = user_login_schema.load(request.get_json(silent=True) or {})
    user, tokens = _manager().login(
        payload.get("password"),
        username=payload.get("username"),
        email=payload.get("email"),
    )
    response, status = success_response(
        {
            "user": user_out_schema.dump(user),
            "accessToken": tokens.access_token,
            "refreshToken": tokens.refresh_token,
        },
        "User logged in successfully",
    )
    return _set_token_cookies(response, tokens), status


@bp.post("/refresh")
def refresh():
    """
    Use the refresh token (cookie or body) to obtain new access and refresh tokens (rotation)
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         required: false
         schema:
           type: object
           properties:
             refreshToken: { type: string }
    responses:
      200:
        description: OK (new tokens, cookies replaced)
      401:
        description: Missing, invalid, expired or reused refresh token
    """
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        payload = {}
    presented = request.cookies.get(REFRESH_COOKIE) or payload.get("refreshToken")
    tokens = _manager().refresh(presented)
    response, status = success_response(
        {"accessToken": tokens.access_token, "refreshToken": tokens.refresh_token},
        "Access token refreshed",
    )
    return _set_token_cookies(response, tokens), status


@bp.post("/logout")
@jwt_required()
def logout():
    """
    Logout: revokes the current refresh token and clears both cookies
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      200:
        description: Logged out
      401:
        description: Unauthorized
    """
    _manager().logout(g.current_user.id)
    response, status = success_response({}, "User logged out")
    opts = _cookie_options()
    response.delete_cookie(ACCESS_COOKIE, **opts)
    response.delete_cookie(REFRESH_COOKIE, **opts)
    return response, status


@bp.post("/change-password")
@jwt_required()
def change_password():
    """
    Change the current user's password; issued tokens stay valid
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             oldPassword: { type: string }
             newPassword: { type: string }
    responses:
      200:
        description: Password changed
      401:
        description: Invalid old password
      422:
        description: Validation error
    """
    data = password_change_schema.load(request.get_json(silent=True) or {})
    _manager().change_password(g.current_user.id, data["old_password"], data["new_password"])
    return success_response({}, "Password changed successfully")
