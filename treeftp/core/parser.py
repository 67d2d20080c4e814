import logging
from dataclasses import dataclass

from treeftp.core.errors import ProtocolParseError

logger = logging.getLogger(__name__)

RESPONSE_TYPES = {
    '1': 'preliminary',
    '2': 'success',
    '3': 'missing_info',
    '4': 'error',
    '5': 'error'
}

# USER / PASS replies accepted as a successful login step
LOGIN_ACCEPTED_CODES = ("230", "331")
PASV_ACCEPTED_CODE = "227"
# Lines that close a multi-line reply on the control connection
COMPLETION_CODES = ("226", "421")


class MessageStructure:
    def __init__(self, code: str, message: str, type: str):
        self.code = code
        self.message = message
        self.type = type

    def __repr__(self):
        return f"MessageStructure(code={self.code!r}, type={self.type!r}, message={self.message!r})"


@dataclass
class Entry:
    """One parsed line of a directory listing."""
    name: str
    is_directory: bool


class Parser:
    """
    Parses control replies, PASV payloads and raw LIST lines.

    Listing lines are expected in the Unix `ls -l` layout:
        drwxr-xr-x 2 user group 4096 Jan 28 10:00 dirName
    Anything else is tolerated and classified as a file.
    """

    def parse_data(self, data: str) -> MessageStructure:
        data = (data or "").strip()

        code = data[:3]
        if not code.isdigit() or len(code) != 3:
            logger.debug("Reply without a status code: %r", data)
            return MessageStructure("000", data, "unknown")

        message = data[4:] if len(data) > 3 and data[3] in (' ', '-') else data[3:]
        ans = MessageStructure(code, message, RESPONSE_TYPES.get(code[0], 'unknown'))
        logger.debug("Parsed response: code=%s, type=%s, message=%s", code, ans.type, message[:50])
        return ans

    @staticmethod
    def is_login_accepted(response: str) -> bool:
        return bool(response) and response[:3] in LOGIN_ACCEPTED_CODES

    @staticmethod
    def is_completion_line(line: str) -> bool:
        return line.startswith(COMPLETION_CODES)

    def parse_pasv_response(self, message: str):
        """Parses the PASV response to extract IP and port."""
        try:
            start = message.index('(') + 1
            end = message.index(')', start)
        except ValueError as e:
            raise ProtocolParseError(f"Invalid PASV response format: {message!r}") from e

        parts = [part.strip() for part in message[start:end].split(',')]
        if len(parts) != 6:
            raise ProtocolParseError(f"PASV payload needs 6 fields, got {len(parts)}: {message!r}")
        if not all(part.isascii() and part.isdigit() for part in parts):
            raise ProtocolParseError(f"Non-numeric field in PASV payload: {message!r}")

        ip = '.'.join(parts[:4])
        port = int(parts[4]) * 256 + int(parts[5])
        logger.debug("PASV parsed: %s:%d", ip, port)
        return ip, port

    # ----------------- listing lines -----------------
    @staticmethod
    def is_directory(line: str) -> bool:
        return line.startswith("d")

    @staticmethod
    def parse_name(line: str) -> str:
        # Names containing spaces keep only their last word.
        tokens = line.split()
        return tokens[-1] if tokens else ""

    def parse_entry(self, line: str) -> Entry:
        return Entry(name=self.parse_name(line), is_directory=self.is_directory(line))
