"""PKCS#1, PKCS#8 and SubjectPublicKeyInfo encoding of generated keypairs.

The layouts follow RFC 8017 (RSAPrivateKey, RSAPublicKey), RFC 5208
(PrivateKeyInfo), RFC 5915 (ECPrivateKey) and RFC 5480 (EC
SubjectPublicKeyInfo). Parsing on the way back in is left to the
cryptography library.
"""

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa

from pemkeygen import curves, der
from pemkeygen.errors import (
    KeyDecodeError,
    UnsupportedAlgorithmError,
    UnsupportedFormatError,
)
from pemkeygen.models import (
    Algorithm,
    BlobKind,
    BlobStructure,
    EncodedBlob,
    KeyPair,
    PrivateKeyFormat,
    PublicNumbers,
)

OID_RSA_ENCRYPTION: str = "1.2.840.113549.1.1.1"
OID_EC_PUBLIC_KEY: str = "1.2.840.10045.2.1"


def algorithm_oids(key_pair: KeyPair) -> tuple[str, str | None]:
    """Return (algorithm OID, curve OID or None) identifying ``key_pair``."""
    if key_pair.algorithm == Algorithm.RSA:
        return OID_RSA_ENCRYPTION, None
    return OID_EC_PUBLIC_KEY, _named_curve(key_pair).oid


def _algorithm_identifier(key_pair: KeyPair) -> bytes:
    algorithm, curve = algorithm_oids(key_pair)
    parameters: bytes = (
        der.null() if curve is None else der.object_identifier(curve)
    )
    return der.sequence(der.object_identifier(algorithm), parameters)


def _named_curve(key_pair: KeyPair) -> curves.NamedCurve:
    return curves.by_curve(key_pair.public_numbers.curve)


def _rsa_private_key(numbers: rsa.RSAPrivateNumbers) -> bytes:
    public: rsa.RSAPublicNumbers = numbers.public_numbers
    return der.sequence(
        der.integer(0),
        der.integer(public.n),
        der.integer(public.e),
        der.integer(numbers.d),
        der.integer(numbers.p),
        der.integer(numbers.q),
        der.integer(numbers.dmp1),
        der.integer(numbers.dmq1),
        der.integer(numbers.iqmp),
    )


def _ec_point(key_pair: KeyPair) -> bytes:
    """Uncompressed SEC 1 point encoding: 0x04 || X || Y."""
    named: curves.NamedCurve = _named_curve(key_pair)
    public: ec.EllipticCurvePublicNumbers = key_pair.public_numbers
    return (
        b"\x04"
        + public.x.to_bytes(named.field_size, "big")
        + public.y.to_bytes(named.field_size, "big")
    )


def _ec_private_key(key_pair: KeyPair) -> bytes:
    # the curve is named in the outer AlgorithmIdentifier; [0] is omitted
    named: curves.NamedCurve = _named_curve(key_pair)
    numbers: ec.EllipticCurvePrivateNumbers = key_pair.private_numbers
    return der.sequence(
        der.integer(1),
        der.octet_string(
            numbers.private_value.to_bytes(named.scalar_size, "big")
        ),
        der.context(1, der.bit_string(_ec_point(key_pair))),
    )


def encode_private(
    key_pair: KeyPair, fmt: PrivateKeyFormat | str
) -> EncodedBlob:
    try:
        fmt = PrivateKeyFormat(fmt)
    except ValueError as err:
        raise UnsupportedFormatError(
            f"Unsupported private key format {fmt!r}"
        ) from err
    if fmt == PrivateKeyFormat.PKCS1:
        if key_pair.algorithm != Algorithm.RSA:
            raise UnsupportedFormatError(
                "PKCS#1 can only encode RSA private keys; use PKCS#8"
            )
        data: bytes = _rsa_private_key(key_pair.private_numbers)
        return EncodedBlob(BlobKind.PRIVATE, BlobStructure.PKCS1, data)

    if key_pair.algorithm == Algorithm.RSA:
        body: bytes = _rsa_private_key(key_pair.private_numbers)
    else:
        body = _ec_private_key(key_pair)
    data = der.sequence(
        der.integer(0),
        _algorithm_identifier(key_pair),
        der.octet_string(body),
    )
    return EncodedBlob(BlobKind.PRIVATE, BlobStructure.PKCS8, data)


def encode_public(key_pair: KeyPair) -> EncodedBlob:
    if key_pair.algorithm == Algorithm.RSA:
        public: rsa.RSAPublicNumbers = key_pair.public_numbers
        key: bytes = der.sequence(
            der.integer(public.n), der.integer(public.e)
        )
    else:
        key = _ec_point(key_pair)
    data: bytes = der.sequence(
        _algorithm_identifier(key_pair), der.bit_string(key)
    )
    return EncodedBlob(BlobKind.PUBLIC, BlobStructure.SPKI, data)


def encode_raw(key_pair: KeyPair) -> tuple[EncodedBlob, EncodedBlob]:
    """Raw EC scalar and ``X || Y`` point, with no structure around them."""
    if key_pair.algorithm != Algorithm.EC:
        raise UnsupportedFormatError(
            "Raw export is only defined for EC keys"
        )
    named: curves.NamedCurve = _named_curve(key_pair)
    numbers: ec.EllipticCurvePrivateNumbers = key_pair.private_numbers
    private: bytes = numbers.private_value.to_bytes(
        named.scalar_size, "big"
    )
    public: bytes = _ec_point(key_pair)[1:]
    return (
        EncodedBlob(BlobKind.PRIVATE, BlobStructure.RAW, private),
        EncodedBlob(BlobKind.PUBLIC, BlobStructure.RAW, public),
    )


def decode_private(data: bytes) -> KeyPair:
    try:
        private_key = serialization.load_der_private_key(
            data, password=None
        )
    except (ValueError, TypeError) as err:
        raise KeyDecodeError(f"Cannot decode private key: {err}") from err
    if not isinstance(
        private_key, (rsa.RSAPrivateKey, ec.EllipticCurvePrivateKey)
    ):
        raise UnsupportedAlgorithmError(
            f"Unsupported private key type {type(private_key).__name__}"
        )
    key_pair: KeyPair = KeyPair.from_private_key(private_key)
    if key_pair.algorithm == Algorithm.EC:
        _named_curve(key_pair)
    return key_pair


def decode_public(data: bytes) -> PublicNumbers:
    try:
        public_key = serialization.load_der_public_key(data)
    except (ValueError, TypeError) as err:
        raise KeyDecodeError(f"Cannot decode public key: {err}") from err
    if not isinstance(
        public_key, (rsa.RSAPublicKey, ec.EllipticCurvePublicKey)
    ):
        raise UnsupportedAlgorithmError(
            f"Unsupported public key type {type(public_key).__name__}"
        )
    return public_key.public_numbers()


def private_key_algorithm(data: bytes) -> tuple[str, str | None]:
    """Return (algorithm OID, curve OID or None) of a PKCS#8 structure."""
    tag, info, _ = der.read_tlv(data)
    if tag != der.TAG_SEQUENCE:
        raise KeyDecodeError("PrivateKeyInfo is not a SEQUENCE")
    tag, _, offset = der.read_tlv(info)
    if tag != der.TAG_INTEGER:
        raise KeyDecodeError("PrivateKeyInfo has no version")
    tag, identifier, _ = der.read_tlv(info, offset)
    if tag != der.TAG_SEQUENCE:
        raise KeyDecodeError("PrivateKeyInfo has no AlgorithmIdentifier")
    tag, oid, offset = der.read_tlv(identifier)
    if tag != der.TAG_OBJECT_IDENTIFIER:
        raise KeyDecodeError("AlgorithmIdentifier has no algorithm OID")
    parameters: str | None = None
    if offset < len(identifier):
        tag, value, _ = der.read_tlv(identifier, offset)
        if tag == der.TAG_OBJECT_IDENTIFIER:
            parameters = der.oid_to_str(value)
    return der.oid_to_str(oid), parameters


def same_key(left: KeyPair, right: KeyPair) -> bool:
    # number objects compare every component, curve included
    return (
        left.algorithm == right.algorithm
        and left.private_numbers == right.private_numbers
    )
