import os

import pytest

from nodedisk.sparse import (
    ENV_SPARSE_FILE_COUNT,
    ENV_SPARSE_FILE_DIR,
    ENV_SPARSE_FILE_SIZE,
    SPARSE_FILE_DEFAULT_SIZE,
    SPARSE_FILE_MIN_SIZE,
    check_and_create_sparse_file,
    create_sparse_file,
    get_active_sparse_block_devices_uuid,
    get_sparse_block_device_uuid,
    get_sparse_file_count,
    get_sparse_file_dir,
    get_sparse_file_size,
)


def test_sparse_dir_not_set(monkeypatch):
    monkeypatch.setenv(ENV_SPARSE_FILE_DIR, "")
    assert get_sparse_file_dir() == ""


def test_sparse_dir_invalid(monkeypatch, tmp_path):
    monkeypatch.setenv(ENV_SPARSE_FILE_DIR, str(tmp_path / "invalid"))
    assert get_sparse_file_dir() == ""


def test_sparse_dir_is_a_file(monkeypatch, tmp_path):
    plain = tmp_path / "plain"
    plain.write_text("x")
    monkeypatch.setenv(ENV_SPARSE_FILE_DIR, str(plain))
    assert get_sparse_file_dir() == ""


def test_sparse_dir_valid(monkeypatch, tmp_path):
    monkeypatch.setenv(ENV_SPARSE_FILE_DIR, str(tmp_path))
    assert get_sparse_file_dir() == str(tmp_path)


@pytest.mark.parametrize("value, expected", [("", 1), ("2", 2), ("z", 0)])
def test_sparse_file_count(monkeypatch, value, expected):
    monkeypatch.setenv(ENV_SPARSE_FILE_COUNT, value)
    assert get_sparse_file_count() == expected


def test_sparse_file_count_unset(monkeypatch):
    monkeypatch.delenv(ENV_SPARSE_FILE_COUNT, raising=False)
    assert get_sparse_file_count() == 1


@pytest.mark.parametrize(
    "value, expected",
    [
        ("", SPARSE_FILE_DEFAULT_SIZE),
        ("2000000000", 2000000000),
        ("1.073741824e+11", 107374182400),
        ("100", SPARSE_FILE_MIN_SIZE),
        ("z", 0),
    ],
)
def test_sparse_file_size(monkeypatch, value, expected):
    monkeypatch.setenv(ENV_SPARSE_FILE_SIZE, value)
    assert get_sparse_file_size() == expected


def test_check_and_create_sparse_file(tmp_path):
    target = str(tmp_path / "test.img")
    check_and_create_sparse_file(target, 1000)
    assert os.path.getsize(target) == 1000
    # an existing file is reused, not resized
    check_and_create_sparse_file(target, 2000)
    assert os.path.getsize(target) == 1000


def test_create_sparse_file_negative_size(tmp_path):
    with pytest.raises(ValueError):
        create_sparse_file(str(tmp_path / "neg.img"), -1)


def test_sparse_uuid_pinned_values():
    assert (
        get_sparse_block_device_uuid("instance-1", "/tmp/0-ndm-sparse.img")
        == "sparse-2b3468d4b928c7e048ad8747ba710e4c"
    )
    assert (
        get_sparse_block_device_uuid("instance-1", "/tmp/1-ndm-sparse.img")
        == "sparse-af2cd3d402e3447e315aadb7e7b46a34"
    )
    assert (
        get_sparse_block_device_uuid("fake-host-name", "/tmp/0-ndm-sparse.img")
        == "sparse-11063db4a4bfd3d0443d0b9d98391707"
    )


def test_active_sparse_uuids(monkeypatch, tmp_path):
    (tmp_path / "1-ndm-sparse.img").write_bytes(b"")
    (tmp_path / "0-ndm-sparse.img").write_bytes(b"")
    (tmp_path / "other.img").write_bytes(b"")
    monkeypatch.setenv(ENV_SPARSE_FILE_DIR, str(tmp_path))
    expected = [
        get_sparse_block_device_uuid("instance-1", str(tmp_path / "0-ndm-sparse.img")),
        get_sparse_block_device_uuid("instance-1", str(tmp_path / "1-ndm-sparse.img")),
    ]
    assert get_active_sparse_block_devices_uuid("instance-1") == expected


def test_active_sparse_uuids_invalid_dir(monkeypatch, tmp_path):
    monkeypatch.setenv(ENV_SPARSE_FILE_DIR, str(tmp_path / "invalid"))
    assert get_active_sparse_block_devices_uuid("instance-1") == []