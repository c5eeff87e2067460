from dataflow_ui.state import LocalStorage, MemoryStorage


def test_local_storage_round_trip(tmp_path):
    storage = LocalStorage(str(tmp_path / "ls.db"))

    assert storage.get_item("k") is None
    storage.set_item("k", "v1")
    storage.set_item("k", "v2")
    assert storage.get_item("k") == "v2"

    storage.remove_item("k")
    assert storage.get_item("k") is None
    storage.remove_item("k")


def test_local_storage_persists_across_instances(tmp_path):
    path = str(tmp_path / "nested" / "ls.db")
    LocalStorage(path).set_item("theme", "dark")
    assert LocalStorage(path).get_item("theme") == "dark"


def test_local_storage_isolated_by_origin(tmp_path):
    path = str(tmp_path / "ls.db")
    a = LocalStorage(path, origin="http://a.test")
    b = LocalStorage(path, origin="http://b.test")

    a.set_item("key", "from-a")
    b.set_item("key", "from-b")
    assert a.get_item("key") == "from-a"

    a.clear()
    assert a.get_item("key") is None
    assert b.get_item("key") == "from-b"


def test_memory_storage_copies_initial():
    initial = {"k": "v"}
    storage = MemoryStorage(initial)
    storage.set_item("k", "changed")
    storage.clear()

    assert initial == {"k": "v"}
    assert storage.get_item("k") is None
