import pytest

from fakes import dir_line, file_line
from treeftp.core.errors import ProtocolParseError
from treeftp.core.parser import Entry, Parser


@pytest.fixture
def parser():
    return Parser()


# -----------------------------------------------------------------------------
# LISTING LINES
# -----------------------------------------------------------------------------

def test_is_directory_with_directory_line(parser):
    assert parser.is_directory("drwxr-xr-x 2 user group 4096 Jan 28 10:00 dirName") is True


@pytest.mark.parametrize("line", [
    "-rw-r--r-- 1 user group 1024 Jan 28 11:00 fileName.txt",
    "lrwxrwxrwx 1 user group 7 Jan 28 11:00 link -> target",
    "total 12",
])
def test_is_directory_with_other_lines(parser, line):
    assert parser.is_directory(line) is False


def test_parse_name_returns_last_token(parser):
    assert parser.parse_name("-rw-r--r-- 1 user group 1024 Jan 28 11:00 fileName.txt") == "fileName.txt"


def test_parse_name_collapses_whitespace_runs(parser):
    assert parser.parse_name("drwxr-xr-x   2 ftp    ftp     4096 Jan 28 10:00    pub  ") == "pub"


def test_parse_name_without_whitespace_returns_line(parser):
    assert parser.parse_name("/pub/linux") == "/pub/linux"
    assert parser.parse_name("/") == "/"


@pytest.mark.parametrize("line", ["", "   ", "\t"])
def test_parse_name_blank_line_is_empty(parser, line):
    assert parser.parse_name(line) == ""


def test_parse_entry(parser):
    assert parser.parse_entry(dir_line("docs")) == Entry(name="docs", is_directory=True)
    assert parser.parse_entry(file_line("a.txt")) == Entry(name="a.txt", is_directory=False)


# -----------------------------------------------------------------------------
# CONTROL REPLIES
# -----------------------------------------------------------------------------

@pytest.mark.parametrize("raw, code, kind", [
    ("227 Entering Passive Mode (172,25,0,12,156,189)", "227", "success"),
    ("200 OK", "200", "success"),
    ("500 Syntax error", "500", "error"),
    ("150 Opening data connection", "150", "preliminary"),
    ("331 Password required", "331", "missing_info"),
    ("425 Can't open data connection", "425", "error"),
    ("hello", "000", "unknown"),
    ("", "000", "unknown"),
])
def test_parse_data_classifies_reply(parser, raw, code, kind):
    result = parser.parse_data(raw)
    assert result.code == code
    assert result.type == kind


def test_parse_data_keeps_message(parser):
    assert parser.parse_data("230 User logged in").message == "User logged in"


@pytest.mark.parametrize("reply, accepted", [
    ("230 User logged in", True),
    ("331 User name okay, need password", True),
    ("530 Not logged in", False),
    ("23", False),
    ("", False),
])
def test_is_login_accepted(parser, reply, accepted):
    assert parser.is_login_accepted(reply) is accepted


def test_completion_lines(parser):
    assert parser.is_completion_line("226 Directory send OK")
    assert parser.is_completion_line("421 Timeout")
    assert not parser.is_completion_line("150 Here comes the directory listing")


# -----------------------------------------------------------------------------
# PASV PAYLOAD
# -----------------------------------------------------------------------------

def test_parse_pasv_response(parser):
    assert parser.parse_pasv_response("Entering Passive Mode (127,0,0,1,19,136)") == ("127.0.0.1", 5000)


def test_parse_pasv_response_tolerates_spaces(parser):
    assert parser.parse_pasv_response("Entering Passive Mode (10, 0, 0, 7, 0, 21).") == ("10.0.0.7", 21)


@pytest.mark.parametrize("message", [
    "Entering Passive Mode",
    "Entering Passive Mode (127,0,0,1,19)",
    "Entering Passive Mode (127,0,0,1,19,136,7)",
    "Entering Passive Mode (127,0,0,x,19,136)",
    "Entering Passive Mode (127,0,0,1,19,136",
    "Entering Passive Mode (127,0,0,1,19,²)",
])
def test_parse_pasv_response_malformed(parser, message):
    with pytest.raises(ProtocolParseError):
        parser.parse_pasv_response(message)
