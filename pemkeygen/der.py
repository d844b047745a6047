"""Minimal DER (X.690) encoding for the key structures this tool emits.

Only definite lengths and the handful of universal types used by PKCS#1,
PKCS#8, SEC 1 and X.509 SubjectPublicKeyInfo are supported.
"""

from pemkeygen.errors import KeyDecodeError

TAG_INTEGER: int = 0x02
TAG_BIT_STRING: int = 0x03
TAG_OCTET_STRING: int = 0x04
TAG_NULL: int = 0x05
TAG_OBJECT_IDENTIFIER: int = 0x06
TAG_SEQUENCE: int = 0x30


def encode_length(length: int) -> bytes:
    if length < 0:
        raise ValueError("length must be non-negative")
    if length < 0x80:
        return bytes([length])
    body: bytes = length.to_bytes((length.bit_length() + 7) // 8, "big")
    return bytes([0x80 | len(body)]) + body


def tlv(tag: int, value: bytes) -> bytes:
    return bytes([tag]) + encode_length(len(value)) + value


def integer(value: int) -> bytes:
    if value < 0:
        raise ValueError("negative integers are not used in key structures")
    # one extra bit keeps the sign bit clear
    body: bytes = value.to_bytes(value.bit_length() // 8 + 1, "big")
    return tlv(TAG_INTEGER, body)


def null() -> bytes:
    return tlv(TAG_NULL, b"")


def octet_string(value: bytes) -> bytes:
    return tlv(TAG_OCTET_STRING, value)


def bit_string(value: bytes) -> bytes:
    return tlv(TAG_BIT_STRING, b"\x00" + value)


def object_identifier(oid: str) -> bytes:
    arcs: list[int] = [int(arc) for arc in oid.split(".")]
    if len(arcs) < 2 or arcs[0] > 2 or (arcs[0] < 2 and arcs[1] >= 40):
        raise ValueError(f"Invalid object identifier {oid!r}")
    body: bytearray = bytearray()
    for arc in [40 * arcs[0] + arcs[1], *arcs[2:]]:
        chunk: list[int] = [arc & 0x7F]
        arc >>= 7
        while arc:
            chunk.append(0x80 | (arc & 0x7F))
            arc >>= 7
        body.extend(reversed(chunk))
    return tlv(TAG_OBJECT_IDENTIFIER, bytes(body))


def sequence(*items: bytes) -> bytes:
    return tlv(TAG_SEQUENCE, b"".join(items))


def context(number: int, value: bytes) -> bytes:
    """Explicitly tagged, constructed context-specific field ``[number]``."""
    return tlv(0xA0 | number, value)


def read_tlv(data: bytes, offset: int = 0) -> tuple[int, bytes, int]:
    """Read one element at ``offset``; return (tag, value, next offset)."""
    try:
        tag: int = data[offset]
        first: int = data[offset + 1]
    except IndexError as err:
        raise KeyDecodeError("Truncated DER element") from err
    offset += 2
    if first & 0x80:
        size: int = first & 0x7F
        if size == 0 or offset + size > len(data):
            raise KeyDecodeError("Invalid DER length")
        length: int = int.from_bytes(data[offset : offset + size], "big")
        offset += size
    else:
        length = first
    end: int = offset + length
    if end > len(data):
        raise KeyDecodeError("Truncated DER element")
    return tag, data[offset:end], end


def oid_to_str(body: bytes) -> str:
    arcs: list[int] = []
    value: int = 0
    for byte in body:
        value = (value << 7) | (byte & 0x7F)
        if not byte & 0x80:
            arcs.append(value)
            value = 0
    if not arcs:
        raise KeyDecodeError("Empty object identifier")
    first: int = arcs[0]
    head: list[int] = [min(first // 40, 2), first - 40 * min(first // 40, 2)]
    return ".".join(str(arc) for arc in head + arcs[1:])
