import pytest

from sysprobe.linux.machineid import machine_id


def test_first_existing_file_wins(tmp_path):
    second = tmp_path / "second"
    third = tmp_path / "third"
    second.write_text("  made-up-machine-id\n")
    third.write_text("other-made-up-id\n")
    assert machine_id([tmp_path / "missing", second, third]) == "made-up-machine-id"


def test_value_is_stripped(tmp_path):
    path = tmp_path / "machine-id"
    path.write_bytes(b"\tplaceholder-id \n\n")
    assert machine_id([path]) == "placeholder-id"


def test_no_file_found_raises_not_implemented(tmp_path):
    with pytest.raises(NotImplementedError):
        machine_id([tmp_path / "a", tmp_path / "b"])


def test_unreadable_path_raises_os_error(tmp_path):
    with pytest.raises(OSError):
        machine_id([tmp_path])