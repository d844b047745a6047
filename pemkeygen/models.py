from dataclasses import dataclass
from enum import StrEnum, auto

from cryptography.hazmat.primitives.asymmetric import ec, rsa

from pemkeygen.errors import UnsupportedFormatError

PEM_LABELS: dict[str, str] = {
    "pkcs1": "RSA PRIVATE KEY",
    "pkcs8": "PRIVATE KEY",
    "spki": "PUBLIC KEY",
}


class Algorithm(StrEnum):
    RSA = auto()
    EC = auto()


class PrivateKeyFormat(StrEnum):
    PKCS1 = auto()
    PKCS8 = auto()

    @classmethod
    def from_option(cls, value: int | str) -> "PrivateKeyFormat":
        """Normalize a ``--pkcs`` value; 1 and 5 both mean PKCS#1."""
        option: str = str(value).strip().lower().removeprefix("pkcs")
        if option in ("1", "5"):
            return cls.PKCS1
        if option == "8":
            return cls.PKCS8
        raise UnsupportedFormatError(f"Unsupported PKCS format {value!r}")


class FrameMode(StrEnum):
    PEM = auto()
    HEX = auto()


class BlobKind(StrEnum):
    PRIVATE = auto()
    PUBLIC = auto()


class BlobStructure(StrEnum):
    PKCS1 = auto()
    PKCS8 = auto()
    SPKI = auto()
    RAW = auto()


PrivateNumbers = rsa.RSAPrivateNumbers | ec.EllipticCurvePrivateNumbers
PublicNumbers = rsa.RSAPublicNumbers | ec.EllipticCurvePublicNumbers


@dataclass(frozen=True)
class KeyPair:
    algorithm: Algorithm
    private_numbers: PrivateNumbers

    @property
    def public_numbers(self) -> PublicNumbers:
        return self.private_numbers.public_numbers

    @classmethod
    def from_private_key(
        cls, key: rsa.RSAPrivateKey | ec.EllipticCurvePrivateKey
    ) -> "KeyPair":
        if isinstance(key, rsa.RSAPrivateKey):
            return cls(Algorithm.RSA, key.private_numbers())
        return cls(Algorithm.EC, key.private_numbers())


@dataclass(frozen=True)
class EncodedBlob:
    kind: BlobKind
    structure: BlobStructure
    data: bytes

    @property
    def pem_label(self) -> str | None:
        return PEM_LABELS.get(self.structure)


@dataclass(frozen=True)
class Output:
    kind: BlobKind
    mode: FrameMode
    text: str

    def encode(self) -> bytes:
        return self.text.encode("ascii")
