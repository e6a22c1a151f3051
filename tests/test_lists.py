import pytest

from ptlib.lists import ListError, ObjList, StrList, StrListFlags, TextMap


class Known:
    def __init__(self, value):
        self.value = value


def ol_asstring(lst):
    return "{" + ", ".join(str(item.value) for item in lst) + "}"


def sl_asstring(lst):
    return "{" + ", ".join(f"{key}:{obj.value}" for key, obj in lst) + "}"


def test_objlist_sequence_from_source():
    s1 = ObjList()
    s1.add(Known(10))
    s1.insert(0, Known(5))
    obj = Known(20)
    s1.insert(2, obj)
    s1.add(Known(30))
    s1.add(Known(40))
    s1.put(4, Known(45))
    s1.delete(4)
    s1.delete(1)
    assert len(s1) == 3
    assert s1.index_of(obj) == 1
    assert ol_asstring(s1) == "{5, 20, 30}"
    s1.clear()
    assert ol_asstring(s1) == "{}"


def test_objlist_podlike_sequence():
    p = ObjList()
    p.add(6)
    p.add(8)
    p.insert(1, 7)
    assert p[1] == 7
    assert len(p) == 3
    p.insert(3, 10)
    assert p.top() == 10
    assert p.pop() == 10
    assert list(p) == [6, 7, 8]


def test_objlist_index_errors():
    p = ObjList([1, 2])
    with pytest.raises(ListError):
        p[2]
    with pytest.raises(ListError):
        p.insert(3, 0)
    with pytest.raises(ListError):
        p.put(-1, 0)
    with pytest.raises(ListError):
        ObjList().pop()
    with pytest.raises(ListError):
        ObjList().top()


def test_objlist_delete_clamps_count():
    p = ObjList([1, 2, 3, 4])
    p.delete(2, 10)
    assert list(p) == [1, 2]


def test_objlist_index_of_uses_identity():
    a = [1]
    p = ObjList([[1], a])
    assert p.index_of(a) == 1
    assert p.index_of([2]) == -1


def test_strlist_unsorted_from_source():
    s1 = StrList(StrListFlags.OWNOBJECTS)
    s1.add("ten", Known(10))
    s1.insert(0, "five", Known(5))
    obj = Known(20)
    s1.insert(2, "twenty", obj)
    s1.add("thirty", Known(30))
    s1.add("forty", Known(40))
    s1.put_at(4, "forty five", Known(45))
    s1.delete(4)
    s1.delete(1)
    assert len(s1) == 3
    assert s1.index_of_object(obj) == 1
    assert s1.index_of("thirty") == 2
    assert s1.index_of("THIRTY") == 2
    assert s1.index_of("forty") == -1
    assert sl_asstring(s1) == "{five:5, twenty:20, thirty:30}"


def test_strlist_sorted_casesens_from_source():
    s2 = StrList(StrListFlags.OWNOBJECTS | StrListFlags.SORTED | StrListFlags.CASESENS)
    for key, value in [("five", 5), ("ten", 10), ("twenty", 20), ("thirty", 30), ("forty", 40)]:
        s2.add(key, Known(value))
    assert len(s2) == 5
    assert s2.index_of("thirty") == 3
    assert s2.index_of("THIRTY") == -1
    assert s2.index_of("hovik") == -1
    assert sl_asstring(s2) == "{five:5, forty:40, ten:10, thirty:30, twenty:20}"
    s2.clear()
    assert sl_asstring(s2) == "{}"


def test_strlist_duplicates_from_source():
    s3 = StrList(StrListFlags.OWNOBJECTS | StrListFlags.SORTED | StrListFlags.DUPLICATES)
    for key in ["a", "b", "b", "b", "b", "b", "b", "c"]:
        s3.add(key, None)
    assert s3.index_of("b") == 1
    s3.delete(1, 2)
    assert len(s3) == 6
    assert [key for key, _ in s3] == ["a", "b", "b", "b", "b", "c"]


def test_strlist_put_from_source():
    s = StrList(StrListFlags.OWNOBJECTS | StrListFlags.SORTED)
    for key, value in [("five", 5), ("ten", 10), ("twenty", 20), ("thirty", 30), ("forty", 40)]:
        s.put(key, Known(value))
    assert s.get("twenty").value == 20
    assert s.get("hovik") is None
    assert len(s) == 5
    s.put("twenty", None)
    assert len(s) == 4
    assert s.get("twenty") is None


def test_strlist_sorted_search_position():
    s = StrList(StrListFlags.SORTED)
    s.add("b")
    s.add("d")
    assert s.search("c") == (False, 1)
    assert s.search("D") == (True, 1)


def test_strlist_errors():
    sorted_list = StrList(StrListFlags.SORTED)
    sorted_list.add("x", 1)
    with pytest.raises(ListError):
        sorted_list.add("X", 2)
    with pytest.raises(ListError):
        sorted_list.insert(0, "a", 1)
    with pytest.raises(ListError):
        sorted_list.put_at(0, "a", 1)
    unsorted = StrList()
    with pytest.raises(ListError):
        unsorted.get("x")
    with pytest.raises(ListError):
        unsorted.put("x", 1)
    with pytest.raises(ListError):
        unsorted.search("x")
    dups = StrList(StrListFlags.SORTED | StrListFlags.DUPLICATES)
    with pytest.raises(ListError):
        dups.put("x", 1)
    with pytest.raises(ListError):
        unsorted.key_at(0)


def test_textmap_from_source():
    c = TextMap()
    c.put("name1", "value1")
    c.put("name2", "value2")
    c.put("name1", "value3")
    assert c.key_at(1) == "name2"
    c.put("name2", "")
    assert len(c) == 1
    assert c["name1"] == "value3"
    assert c["name2"] == ""


def test_textmap_case_handling():
    insensitive = TextMap()
    insensitive.put("Key", "v")
    assert insensitive.get("KEY") == "v"
    assert insensitive.index_of("key") == 0
    sensitive = TextMap(casesens=True)
    sensitive.put("Key", "v")
    assert sensitive.get("key") == ""
    assert sensitive.index_of("key") == -1


def test_textmap_sorted_iteration():
    m = TextMap()
    m.put("c", "3")
    m.put("a", "1")
    m.put("b", "2")
    assert list(m) == [("a", "1"), ("b", "2"), ("c", "3")]
    assert m.value_at(2) == "3"
    with pytest.raises(ListError):
        m.value_at(3)