"""
Error taxonomy shared by the codec, the commands and the CLI.

Every failure a command can hit is one of these; the CLI turns them into a
readable message and a non-zero exit status.
"""


class DilikeyError(Exception):
    """Base exception for dilikey errors"""

    pass


class UnsupportedAlgorithm(DilikeyError):
    """Unknown algorithm identifier or CLI algorithm token"""

    pass


class FormatError(DilikeyError):
    """Malformed container or envelope"""

    pass


class LengthMismatch(DilikeyError):
    """Key or signature length does not fit the security level"""

    def __init__(self, role: str, expected, actual: int):
        self.role = role
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Invalid {role} length: expected {expected} bytes, got {actual}"
        )


class EntropySourceError(DilikeyError):
    """Seed material could not be obtained or decoded"""

    pass


class KeyIOError(DilikeyError):
    """File open/read/write failure"""

    pass
