from __future__ import annotations

import io

import pytest
from pydantic import ValidationError

from shared.protocol import (
    ChatCommand,
    CommandValidationError,
    ConfigError,
    MessageFramer,
    ProtocolConfig,
    ProtocolDesync,
    Status,
    split_command,
)
from shared.protocol.commands import parse_name, parse_status, received_filename


def _send(lines, end_turn=True, config=ProtocolConfig()):
    sink = io.BytesIO()
    MessageFramer(io.BytesIO(), sink, config=config).send_message(lines, end_turn)
    return sink.getvalue()


def _reader(data, config=ProtocolConfig()):
    return MessageFramer(io.BytesIO(data), io.BytesIO(), config=config)


def test_roundtrip_preserves_order():
    lines = ["first", "", "  spaced  ", "/name Bob", "ünïcødé", "\ud7fa"]
    assert _reader(_send(lines)).receive_message().lines == lines


def test_wire_lines_are_rotated():
    assert _send(["abc"]) == b"klm\n2oxn3\n"


def test_no_sentinel_without_end_turn():
    assert _send(["a"], end_turn=False) == b"k\n"


def test_back_to_back_messages():
    reader = _reader(_send(["one"]) + _send(["two", "three"]))
    assert reader.receive_message().lines == ["one"]
    assert reader.receive_message().lines == ["two", "three"]


def test_sentinel_text_as_content_is_escaped():
    lines = ["(end)", "\\(end)", "\\\\(end)", "\\plain", "after"]
    data = _send(lines)
    assert data.split(b"\n")[0] != b"2oxn3"
    assert _reader(data).receive_message().lines == lines


def test_eof_before_sentinel_is_desync():
    with pytest.raises(ProtocolDesync):
        _reader(_send(["a", "b"], end_turn=False)).receive_message()
    with pytest.raises(ProtocolDesync):
        _reader(b"").receive_message()


def test_unframeable_line_writes_nothing():
    sink = io.BytesIO()
    with pytest.raises(CommandValidationError):
        # \x00 rotates onto the newline byte
        MessageFramer(io.BytesIO(), sink).send_message(["fine", "\x00"])
    assert sink.getvalue() == b""


def test_alternate_sentinel():
    config = ProtocolConfig(sentinel="<<over>>")
    data = _send(["(end)"], config=config)
    assert data.startswith(b"2oxn3\n")
    assert _reader(data, config).receive_message().lines == ["(end)"]


def test_protocol_config_rejects_bad_values():
    with pytest.raises(ValidationError):
        ProtocolConfig(sentinel="")
    with pytest.raises(ConfigError):
        ProtocolConfig.from_dict({"sentinel": "\\starts-with-escape"})
    with pytest.raises(ConfigError):
        ProtocolConfig.from_dict({"sentinel_escape": "##"})
    with pytest.raises(ValidationError):
        ProtocolConfig().sentinel = "other"


def test_protocol_config_rejects_sentinel_that_rotates_onto_a_newline():
    with pytest.raises(ValidationError):
        ProtocolConfig(sentinel="over\x00")
    with pytest.raises(ValidationError):
        ProtocolConfig(sentinel_escape="\x00")
    with pytest.raises(ConfigError):
        ProtocolConfig.from_dict({"rotation_key": 0, "sentinel": "a\nb"})
    # a key that moves every sentinel character clear of the newline is fine
    assert ProtocolConfig(sentinel="over\x00", rotation_key=11).sentinel == "over\x00"


def test_split_command():
    assert split_command("/name Bob") == (ChatCommand.NAME, "Bob")
    assert split_command("/close") == (ChatCommand.CLOSE, "")
    assert split_command("/named x") == (None, "/named x")
    assert split_command("hello /name") == (None, "hello /name")


def test_name_parsing():
    assert parse_name("Bob", "???") == "Bob"
    assert parse_name("", "???") == "???"
    assert parse_name("   ", "???") == "???"


def test_status_parsing():
    assert parse_status("busy") is Status.BUSY
    assert parse_status("BuSy") is Status.BUSY
    assert parse_status("foo") is Status.AVAILABLE
    assert parse_status("") is Status.AVAILABLE
    assert parse_status("AVAILABLE") is Status.AVAILABLE


def test_received_filename():
    assert received_filename("./photo.bin", "file") == "photo.bin"
    assert received_filename("photo.bin", "file") == "photo.bin"
    assert received_filename("C:\\docs\\notes.txt", "file") == "notes.txt"
    assert received_filename("dir/", "file") == "file"
    assert received_filename("../..", "file") == "file"
    assert received_filename("", "file") == "file"
