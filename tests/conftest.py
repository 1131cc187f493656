import os

import pytest

from api import create_app
from models import storage
from utils.exceptions import DependencyError
from utils.media import MediaUploader

PASSWORD = "correct-horse-battery"


class FakeUploader(MediaUploader):
    """Stands in for the media host; removes the staged file like the real one."""

    def __init__(self):
        self.uploaded = []
        self.fail = False

    def upload(self, local_path):
        name = os.path.basename(local_path)
        os.remove(local_path)
        if self.fail:
            raise DependencyError()
        self.uploaded.append(name)
        return f"https://media.example/{name}"


@pytest.fixture()
def uploader():
    return FakeUploader()


@pytest.fixture()
def app(uploader, tmp_path):
    app = create_app("testing", media_uploader=uploader)
    app.config["UPLOAD_FOLDER"] = str(tmp_path / "uploads")
    yield app
    with app.app_context():
        storage.drop_all()


@pytest.fixture()
def client(app):
    # cookies are sent explicitly so each test controls exactly what is presented
    return app.test_client(use_cookies=False)


@pytest.fixture()
def alice(app):
    with app.app_context():
        user = app.extensions["profile_store"].create(
            PASSWORD,
            app.extensions["password_hasher"],
            username="alice",
            email="a@x.com",
            full_name="Alice Example",
            avatar="https://media.example/alice.png",
        )
        return {"id": user.id, "username": "alice", "email": "a@x.com", "password": PASSWORD}
