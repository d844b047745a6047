class KeygenError(Exception):
    stage: str = "keygen"


class InvalidParameterError(KeygenError):
    stage = "generate"


class UnsupportedAlgorithmError(KeygenError):
    stage = "generate"


class UnsupportedCurveError(KeygenError):
    stage = "generate"

    def __init__(self, curve: str) -> None:
        super().__init__(f"Unsupported curve {curve!r}")
        self.curve: str = curve


class UnsupportedFormatError(KeygenError):
    stage = "encode"


class FileWriteError(KeygenError):
    stage = "write"

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Cannot write {path}: {reason}")
        self.path: str = path


class KeyDecodeError(KeygenError):
    stage = "decode"
