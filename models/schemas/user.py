from marshmallow import Schema, fields, pre_load, validates, ValidationError, EXCLUDE

MIN_PASSWORD_LENGTH = 8


def _norm(v):
    return v.strip().lower() if isinstance(v, str) else v


def _check_password(value):
    if len(value) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long.")


class UserCreateSchema(Schema):
    """Multipart registration form; image files are handled separately."""
    class Meta:
        unknown = EXCLUDE

    full_name = fields.String(required=True, data_key="fullName")
    email = fields.Email(required=True)
    username = fields.String(required=True)
    password = fields.String(required=True, load_only=True)

    @pre_load
    def normalize(self, data, **kwargs):
        data = dict(data)
        for key in ("email", "username"):
            if key in data:
                data[key] = _norm(data[key])
        if isinstance(data.get("fullName"), str):
            data["fullName"] = data["fullName"].strip()
        return data

    @validates("password")
    def validate_password(self, value, **kwargs):
        _check_password(value)


class UserLoginSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    username = fields.String(allow_none=True)
    email = fields.String(allow_none=True)
    password = fields.String(load_default=None, allow_none=True)


class PasswordChangeSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    old_password = fields.String(required=True, data_key="oldPassword")
    new_password = fields.String(required=True, data_key="newPassword")

    @validates("new_password")
    def validate_new_password(self, value, **kwargs):
        _check_password(value)


class UserOutSchema(Schema):
    """Public view of a user; password_hash and refresh tokens are never dumped."""
    id = fields.String(allow_none=False)
    username = fields.String()
    email = fields.String()
    full_name = fields.String(data_key="fullName")
    avatar = fields.String()
    cover_image = fields.String(allow_none=True, data_key="coverImage")
    created_at = fields.DateTime(data_key="createdAt")
    updated_at = fields.DateTime(data_key="updatedAt")
