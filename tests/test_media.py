"""Tests for :class:`utils.media.HttpMediaUploader`."""
from unittest import mock

import pytest
from requests.exceptions import ConnectionError

from utils.exceptions import DependencyError
from utils.media import HttpMediaUploader


@pytest.fixture()
def staged(tmp_path):
    path = tmp_path / "avatar.png"
    path.write_bytes(b"\x89PNG")
    return str(path)


def _reply(status_code=200, body=None):
    response = mock.MagicMock()
    response.status_code = status_code
    response.text = "reply"
    response.json.return_value = body if body is not None else {}
    return response


def test_upload_returns_secure_url(staged, tmp_path):
    uploader = HttpMediaUploader("https://media.example/upload", upload_preset="avatars")
    with mock.patch.object(uploader.session, "post", return_value=_reply(body={"secure_url": "https://cdn/a.png"})) as post:
        assert uploader.upload(staged) == "https://cdn/a.png"
    assert post.call_args.kwargs["data"] == {"upload_preset": "avatars"}
    assert not (tmp_path / "avatar.png").exists()


def test_upload_rejected(staged, tmp_path):
    uploader = HttpMediaUploader("https://media.example/upload")
    with mock.patch.object(uploader.session, "post", return_value=_reply(status_code=500)):
        with pytest.raises(DependencyError):
            uploader.upload(staged)
    assert not (tmp_path / "avatar.png").exists()


def test_upload_reply_without_url(staged):
    uploader = HttpMediaUploader("https://media.example/upload")
    with mock.patch.object(uploader.session, "post", return_value=_reply(body={"id": "1"})):
        with pytest.raises(DependencyError):
            uploader.upload(staged)


def test_host_unreachable(staged, tmp_path):
    uploader = HttpMediaUploader("https://media.example/upload")
    with mock.patch.object(uploader.session, "post", side_effect=ConnectionError("refused")):
        with pytest.raises(DependencyError):
            uploader.upload(staged)
    assert not (tmp_path / "avatar.png").exists()


def test_not_configured(staged, tmp_path):
    uploader = HttpMediaUploader(None)
    with pytest.raises(DependencyError):
        uploader.upload(staged)
    assert not (tmp_path / "avatar.png").exists()


def test_missing_file():
    with pytest.raises(DependencyError):
        HttpMediaUploader("https://media.example/upload").upload("/nonexistent/avatar.png")
