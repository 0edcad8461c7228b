from typing import Optional


class TranslationError(Exception):
    pass


class UnrecognizedKindError(TranslationError):
    def __init__(self, kind: str, line: str) -> None:
        super().__init__(f"unknown node kind '{kind}' in record: {line!r}")
        self.kind = kind
        self.line = line


class MalformedRecordError(TranslationError):
    def __init__(self, kind: str, line: str, pattern: str) -> None:
        super().__init__(
            f"could not match {kind} record {line!r} with pattern {pattern!r}"
        )
        self.kind = kind
        self.line = line
        self.pattern = pattern


class MalformedTreeError(TranslationError):
    def __init__(self, line: str, depth: int, reason: str) -> None:
        super().__init__(f"{reason} (depth {depth}): {line!r}")
        self.line = line
        self.depth = depth
        self.reason = reason


class UnsupportedConstructError(TranslationError):
    def __init__(self, kind: str, detail: str, address: Optional[str] = None) -> None:
        where = f" at {address}" if address else ""
        super().__init__(f"{kind}{where}: {detail}")
        self.kind = kind
        self.detail = detail
        self.address = address


class FrontendError(Exception):
    pass
