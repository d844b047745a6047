from dataclasses import dataclass, field
from types import MappingProxyType

from cryptography.hazmat.primitives.asymmetric import ec

from pemkeygen.errors import UnsupportedCurveError


@dataclass(frozen=True)
class NamedCurve:
    name: str
    oid: str
    scalar_size: int
    curve: ec.EllipticCurve
    aliases: tuple[str, ...] = field(default=())

    @property
    def field_size(self) -> int:
        """Byte length of a field element (one point coordinate)."""
        return (self.curve.key_size + 7) // 8


_CURVES: tuple[NamedCurve, ...] = (
    NamedCurve("secp224r1", "1.3.132.0.33", 28, ec.SECP224R1(), ("p-224",)),
    NamedCurve(
        "secp256r1",
        "1.2.840.10045.3.1.7",
        32,
        ec.SECP256R1(),
        ("prime256v1", "p-256"),
    ),
    NamedCurve("secp384r1", "1.3.132.0.34", 48, ec.SECP384R1(), ("p-384",)),
    NamedCurve("secp521r1", "1.3.132.0.35", 66, ec.SECP521R1(), ("p-521",)),
    NamedCurve("secp256k1", "1.3.132.0.10", 32, ec.SECP256K1()),
    NamedCurve(
        "brainpoolP256r1", "1.3.36.3.3.2.8.1.1.7", 32, ec.BrainpoolP256R1()
    ),
    NamedCurve(
        "brainpoolP384r1", "1.3.36.3.3.2.8.1.1.11", 48, ec.BrainpoolP384R1()
    ),
    NamedCurve(
        "brainpoolP512r1", "1.3.36.3.3.2.8.1.1.13", 64, ec.BrainpoolP512R1()
    ),
)

CURVES: MappingProxyType[str, NamedCurve] = MappingProxyType(
    {
        alias: curve
        for curve in _CURVES
        for alias in (curve.name.lower(), *curve.aliases)
    }
)


def lookup(name: str) -> NamedCurve:
    try:
        return CURVES[name.strip().lower()]
    except (KeyError, AttributeError) as err:
        raise UnsupportedCurveError(str(name)) from err


def by_curve(curve: ec.EllipticCurve) -> NamedCurve:
    """Reverse lookup from a library curve instance (matched on its name)."""
    for named in _CURVES:
        if named.curve.name == curve.name:
            return named
    raise UnsupportedCurveError(curve.name)


def supported_curves() -> list[str]:
    return [curve.name for curve in _CURVES]
