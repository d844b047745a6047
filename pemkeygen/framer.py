import base64
import binascii
import re

from pemkeygen.errors import KeyDecodeError, UnsupportedFormatError
from pemkeygen.models import EncodedBlob, FrameMode, Output

PEM_LINE_WIDTH: int = 64

_PEM_PATTERN: re.Pattern[str] = re.compile(
    r"-----BEGIN (?P<label>[A-Z0-9 ]+)-----\s*"
    r"(?P<body>[A-Za-z0-9+/=\s]*?)"
    r"-----END (?P<end>[A-Z0-9 ]+)-----"
)


def to_pem(label: str, data: bytes) -> str:
    encoded: str = base64.b64encode(data).decode("ascii")
    lines: list[str] = [
        encoded[i : i + PEM_LINE_WIDTH]
        for i in range(0, len(encoded), PEM_LINE_WIDTH)
    ]
    return "\n".join(
        [f"-----BEGIN {label}-----", *lines, f"-----END {label}-----", ""]
    )


def frame(blob: EncodedBlob, mode: FrameMode | str) -> Output:
    try:
        mode = FrameMode(mode)
    except ValueError as err:
        raise UnsupportedFormatError(
            f"Unsupported output mode {mode!r}"
        ) from err
    if mode == FrameMode.HEX:
        return Output(blob.kind, mode, blob.data.hex())
    label: str | None = blob.pem_label
    if label is None:
        raise UnsupportedFormatError(
            f"A {blob.structure} {blob.kind} blob has no PEM form"
        )
    return Output(blob.kind, mode, to_pem(label, blob.data))


def unframe(text: str) -> tuple[str, bytes]:
    """Parse the first PEM block in ``text``; return (label, DER bytes)."""
    match: re.Match[str] | None = _PEM_PATTERN.search(text)
    if match is None:
        raise KeyDecodeError("No PEM block found")
    label: str = match.group("label")
    if match.group("end") != label:
        raise KeyDecodeError(
            f"PEM footer {match.group('end')!r} does not match {label!r}"
        )
    body: str = "".join(match.group("body").split())
    try:
        return label, base64.b64decode(body, validate=True)
    except binascii.Error as err:
        raise KeyDecodeError(f"Invalid base64 in PEM body: {err}") from err
