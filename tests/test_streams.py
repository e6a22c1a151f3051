import stat
import threading

import pytest

from ptlib.streams import (
    LogFile,
    OutFile,
    OutFilter,
    OutMemory,
    OutNull,
    SeekMode,
    StreamError,
)


def test_outfile_scenario_from_source(tmp_path):
    path = tmp_path / "stmtest.txt"
    f = OutFile(str(path), False, 0o600, 3)
    f.open()
    f.put("T")
    f.put("h")
    f.put("is is a TEST.")
    f.seek(-5, SeekMode.END)
    f.put("tes*/")
    f.seek(13)
    f.put("t.")
    f.puteol()
    f.close()
    assert path.read_bytes() == b"This is a test.\n"

    f.append = True
    f.open()
    f.write(b"The file should contain readable text.")
    f.puteol()
    f.close()
    assert path.read_bytes() == (
        b"This is a test.\nThe file should contain readable text.\n"
    )
    assert stat.S_IMODE(path.stat().st_mode) == 0o600


def test_outfile_tell_counts_buffered_bytes(tmp_path):
    f = OutFile(tmp_path / "t.txt", bufsize=16)
    f.open()
    f.put("hello")
    assert f.tell() == 5
    assert (tmp_path / "t.txt").read_bytes() == b""
    f.flush()
    assert (tmp_path / "t.txt").read_bytes() == b"hello"
    f.close()


def test_outfile_context_manager(tmp_path):
    path = tmp_path / "ctx.txt"
    with OutFile(path) as f:
        f.putline("hello")
        f.putf("%d-%s", 7, "x")
    assert not f.active
    assert path.read_text() == "hello\n7-x"


def test_outfile_open_errors(tmp_path):
    with pytest.raises(StreamError):
        OutFile(tmp_path / "missing" / "x.txt").open()
    with pytest.raises(StreamError):
        OutFile().open()


def test_outmemory_scenario_from_source():
    m = OutMemory(12)
    m.open()
    m.put("MEMOry")
    m.put(" c")
    m.put("lass is working")
    m.seek(1)
    m.put("emo")
    assert m.strdata == "Memory class"
    m.open()
    m.put("memory")
    assert m.strdata == "memory"


def test_outmemory_limit_sets_eof():
    m = OutMemory(5)
    m.open()
    assert m.write("abcdefg") == 5
    assert m.eof is True
    assert m.seek(10) == 5
    assert m.eof is False
    assert m.data == b"abcde"


def test_outmemory_seek_past_end_zero_fills():
    m = OutMemory()
    m.open()
    m.put("ab")
    m.seek(4)
    m.put("c")
    assert m.data == b"ab\x00\x00c"
    assert m.seek(-1, SeekMode.END) == 4


def test_outmemory_negative_seek_raises():
    m = OutMemory()
    m.open()
    with pytest.raises(StreamError):
        m.seek(-1)


def test_outmemory_encodes_text_and_char_codes():
    m = OutMemory()
    m.open()
    m.put("é")
    m.put(65)
    assert m.data == b"\xc3\xa9A"


def test_putf_into_memory():
    m = OutMemory()
    m.open()
    m.putf("%s, %c, %d, %llx", "string", "A", 1234, -1)
    assert m.strdata == "string, A, 1234, ffffffffffffffff"
    m.open()
    m.putf(" %%, %#o, %+010d", 0o765, -3)
    assert m.strdata == " %, 0765, -000000003"


def test_inactive_stream_raises():
    m = OutMemory()
    with pytest.raises(StreamError):
        m.put("x")
    with pytest.raises(StreamError):
        m.strdata
    m.open()
    m.put("x")
    m.close()
    with pytest.raises(StreamError):
        m.data


def test_outnull_discards():
    n = OutNull()
    n.open()
    assert n.write(b"This should go to nowhere") == 25
    assert n.name == "<null>"
    n.close()
    assert n.active is False


def test_logfile_putf_from_threads(tmp_path):
    path = tmp_path / "log.txt"
    log = LogFile(path)
    log.open()
    workers = [
        threading.Thread(target=log.putf, args=("%d-%s\n", i, "x")) for i in range(5)
    ]
    for w in workers:
        w.start()
    for w in workers:
        w.join()
    log.close()
    lines = sorted(path.read_text().splitlines())
    assert lines == ["0-x", "1-x", "2-x", "3-x", "4-x"]


def test_logfile_append(tmp_path):
    path = tmp_path / "log.txt"
    path.write_text("first\n")
    log = LogFile(path, True)
    log.open()
    log.putline("second")
    log.close()
    assert path.read_text() == "first\nsecond\n"


def test_outfilter_passes_data_through():
    mem = OutMemory()
    f = OutFilter(mem, 4)
    f.open()
    assert mem.active is True
    assert f.write("hello world") == 11
    assert mem.strdata == "hello wo"
    f.flush()
    assert mem.strdata == "hello world"
    f.close()
    assert mem.active is True
    assert mem.strdata == "hello world"


def test_outfilter_reassign_closes_filter():
    first = OutMemory()
    second = OutMemory()
    f = OutFilter(first, 8)
    f.open()
    f.put("ab")
    f.stm = second
    assert f.active is False
    assert first.strdata == "ab"
    f.open()
    f.put("cd")
    f.close()
    assert second.strdata == "cd"