import pytest

from webserv.config import Config
from webserv.errors import Conflict, InternalServerError, NotFound
from webserv.files import (
    content_type,
    control_file,
    delete_file,
    file_extension,
    is_cgi,
    is_dynamic_resource,
    read_file,
    write_put_file,
)


@pytest.fixture
def cgi_conf():
    conf = Config()
    conf.apply("cgi", [".py", "/usr/bin/python3"])
    return conf


@pytest.mark.parametrize(
    "name, ext",
    [
        ("/var/www/index.html", "html"),
        ("archive.tar.gz", "gz"),
        ("/var/www/README", ""),
        ("/dir.d/plain", ""),
    ],
)
def test_file_extension(name, ext):
    assert file_extension(name) == ext


def test_content_type_known_and_default():
    mime = {"html": "text/html"}
    assert content_type("/a/index.html", mime, "application/octet-stream") == "text/html"
    assert content_type("/a/data.bin", mime, "application/octet-stream") == "application/octet-stream"


def test_put_creates_then_replaces(tmp_path):
    target = tmp_path / "upload.txt"
    assert write_put_file(str(target), b"first") == (201, "Created")
    assert read_file(str(target)) == b"first"
    assert write_put_file(str(target), b"second") == (204, "No Content")
    assert read_file(str(target)) == b"second"


def test_put_into_missing_directory_conflicts(tmp_path):
    with pytest.raises(Conflict):
        write_put_file(str(tmp_path / "missing" / "f.txt"), b"x")


def test_read_missing_file_is_internal_error(tmp_path):
    with pytest.raises(InternalServerError):
        read_file(str(tmp_path / "nope"))


def test_delete_file(tmp_path):
    target = tmp_path / "gone.txt"
    target.write_bytes(b"data")
    assert delete_file(str(target)) == (204, "No Content")
    assert not target.exists()


def test_delete_missing_is_not_found(tmp_path):
    with pytest.raises(NotFound):
        delete_file(str(tmp_path / "absent"))


def test_delete_directory_without_slash_conflicts(tmp_path):
    directory = tmp_path / "sub"
    directory.mkdir()
    with pytest.raises(Conflict):
        delete_file(str(directory))
    assert directory.exists()


def test_delete_empty_directory_with_slash(tmp_path):
    directory = tmp_path / "sub"
    directory.mkdir()
    assert delete_file(str(directory) + "/") == (204, "No Content")
    assert not directory.exists()


def test_delete_non_empty_directory_conflicts(tmp_path):
    directory = tmp_path / "full"
    directory.mkdir()
    (directory / "f").write_bytes(b"x")
    with pytest.raises(Conflict):
        delete_file(str(directory) + "/")


def test_control_file_dispatch(tmp_path):
    target = str(tmp_path / "c.txt")
    assert control_file("PUT", target, b"body") == (201, "Created")
    assert read_file(target) == b"body"
    assert control_file("DELETE", target) == (204, "No Content")
    with pytest.raises(InternalServerError):
        control_file("GET", target)


def test_is_cgi(cgi_conf):
    assert is_cgi(cgi_conf, "/cgi/script.py") is True
    assert is_cgi(cgi_conf, "/static/page.html") is False
    assert is_dynamic_resource(cgi_conf, "/cgi/script.py") is True
    assert is_dynamic_resource(Config(), "/cgi/script.py") is False