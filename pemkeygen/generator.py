import logging

from cryptography.hazmat.primitives.asymmetric import ec, rsa

from pemkeygen import curves
from pemkeygen.errors import InvalidParameterError, UnsupportedAlgorithmError
from pemkeygen.models import Algorithm, KeyPair

logger: logging.Logger = logging.getLogger(__name__)

PUBLIC_EXPONENT: int = 65537
# policy floor; moduli below 1024 bits are not generated
MIN_RSA_KEY_SIZE: int = 1024


def generate_rsa(key_size: int) -> KeyPair:
    if isinstance(key_size, bool) or not isinstance(key_size, int):
        raise InvalidParameterError(
            f"RSA key size must be an integer, got {key_size!r}"
        )
    if key_size < MIN_RSA_KEY_SIZE:
        raise InvalidParameterError(
            f"RSA key size {key_size} is below the minimum of "
            f"{MIN_RSA_KEY_SIZE} bits"
        )
    logger.info(f"Generating {key_size}-bit RSA key")
    try:
        private_key: rsa.RSAPrivateKey = rsa.generate_private_key(
            public_exponent=PUBLIC_EXPONENT, key_size=key_size
        )
    except ValueError as err:
        raise InvalidParameterError(str(err)) from err
    return KeyPair.from_private_key(private_key)


def generate_ec(curve_name: str) -> KeyPair:
    named: curves.NamedCurve = curves.lookup(curve_name)
    logger.info(f"Generating EC key on {named.name}")
    private_key: ec.EllipticCurvePrivateKey = ec.generate_private_key(
        named.curve
    )
    return KeyPair.from_private_key(private_key)


def generate(
    algorithm: Algorithm | str,
    *,
    key_size: int | None = None,
    curve: str | None = None,
) -> KeyPair:
    try:
        algorithm = Algorithm(str(algorithm).lower())
    except ValueError as err:
        raise UnsupportedAlgorithmError(
            f"Unsupported algorithm {algorithm!r}"
        ) from err
    if algorithm == Algorithm.RSA:
        if key_size is None:
            raise InvalidParameterError("RSA generation needs a key size")
        return generate_rsa(key_size)
    if curve is None:
        raise InvalidParameterError("EC generation needs a curve name")
    return generate_ec(curve)
