import math

import pytest
from cryptography.hazmat.primitives.asymmetric import ec

from pemkeygen import curves
from pemkeygen.errors import (
    InvalidParameterError,
    UnsupportedAlgorithmError,
    UnsupportedCurveError,
)
from pemkeygen.generator import (
    PUBLIC_EXPONENT,
    generate,
    generate_ec,
    generate_rsa,
)
from pemkeygen.models import Algorithm

pytestmark = pytest.mark.generator


def test_rsa_modulus_size_and_exponents(rsa_key_pair):
    numbers = rsa_key_pair.private_numbers
    public = rsa_key_pair.public_numbers
    assert rsa_key_pair.algorithm == Algorithm.RSA
    assert public.n.bit_length() == 2048
    assert public.e == PUBLIC_EXPONENT
    assert numbers.p != numbers.q
    assert numbers.p * numbers.q == public.n
    phi: int = (numbers.p - 1) * (numbers.q - 1)
    lam: int = phi // math.gcd(numbers.p - 1, numbers.q - 1)
    assert math.gcd(public.e, phi) == 1
    assert (public.e * numbers.d) % lam == 1
    assert numbers.dmp1 == numbers.d % (numbers.p - 1)
    assert numbers.dmq1 == numbers.d % (numbers.q - 1)
    assert (numbers.iqmp * numbers.q) % numbers.p == 1


def test_rsa_1024_bits():
    key_pair = generate(Algorithm.RSA, key_size=1024)
    assert key_pair.public_numbers.n.bit_length() == 1024


def test_rsa_keys_are_fresh():
    first = generate_rsa(1024)
    second = generate_rsa(1024)
    assert first.public_numbers.n != second.public_numbers.n


@pytest.mark.parametrize("key_size", [0, -2048, 8, 512, 1023])
def test_rsa_size_too_small(key_size):
    with pytest.raises(InvalidParameterError):
        generate_rsa(key_size)


@pytest.mark.parametrize("key_size", ["2048", 2048.0, True])
def test_rsa_size_not_an_integer(key_size):
    with pytest.raises(InvalidParameterError):
        generate_rsa(key_size)


@pytest.mark.parametrize("name", curves.supported_curves())
def test_ec_public_point_matches_scalar(name):
    key_pair = generate_ec(name)
    numbers = key_pair.private_numbers
    named = curves.lookup(name)
    assert key_pair.algorithm == Algorithm.EC
    assert numbers.public_numbers.curve.name == named.curve.name
    assert 1 <= numbers.private_value < 2 ** (named.scalar_size * 8)
    derived = ec.derive_private_key(numbers.private_value, named.curve)
    assert derived.public_key().public_numbers() == key_pair.public_numbers
    # rejects points that are not on the curve
    key_pair.public_numbers.public_key()


def test_ec_aliases_and_case():
    assert curves.lookup("prime256v1") is curves.lookup("secp256r1")
    assert curves.lookup("P-256") is curves.lookup("SECP256R1")
    key_pair = generate("EC", curve="prime256v1")
    assert key_pair.public_numbers.curve.name == "secp256r1"


def test_ec_scalars_are_fresh():
    first = generate_ec("secp256k1")
    second = generate_ec("secp256k1")
    assert (
        first.private_numbers.private_value
        != second.private_numbers.private_value
    )


def test_unknown_curve():
    with pytest.raises(UnsupportedCurveError) as excinfo:
        generate(Algorithm.EC, curve="not-a-real-curve")
    assert excinfo.value.curve == "not-a-real-curve"
    assert excinfo.value.stage == "generate"


def test_unknown_algorithm():
    with pytest.raises(UnsupportedAlgorithmError):
        generate("dsa", key_size=2048)


def test_missing_parameters():
    with pytest.raises(InvalidParameterError):
        generate(Algorithm.RSA)
    with pytest.raises(InvalidParameterError):
        generate(Algorithm.EC)
