import pytest
from py_ecc.optimized_bn128 import curve_order, field_modulus

from groth16_sol.errors import Groth16SolError
from groth16_sol.tests import configure_test_logging
from groth16_sol.verifiers.field import (BABYJUBJUB_ORDER, P, R, BabyJubJubFr,
                                         Fq, Fq2, Fr, negate)

configure_test_logging()


def test_moduli_match_backend():
    assert P == field_modulus
    assert R == curve_order
    assert R < P
    assert BabyJubJubFr.MODULUS == BABYJUBJUB_ORDER


def test_construction_reduces_to_canonical_residue():
    assert Fr(R).n == 0
    assert Fr(R + 5) == Fr(5)
    assert Fr(-1).n == R - 1
    assert Fq(P + 2).n == 2
    assert Fr.from_int(2 * R + 3) == 3


def test_is_canonical_int():
    assert Fr.is_canonical_int(0)
    assert Fr.is_canonical_int(R - 1)
    assert not Fr.is_canonical_int(R)
    assert not Fr.is_canonical_int(-1)


def test_arithmetic_and_inverse():
    a, b = Fq(7), Fq(11)
    assert a + b == 18
    assert a - b == Fq(P - 4)
    assert a * b == 77
    assert (a / b) * b == a
    assert a * a.inv() == 1
    assert a ** -1 == a.inv()
    assert 3 - a == Fq(-4)
    with pytest.raises(ZeroDivisionError):
        Fq(0).inv()


def test_fields_do_not_mix():
    with pytest.raises(TypeError):
        Fr(1) + Fq(1)
    assert Fr(1) != Fq(1)


def test_negation_is_an_involution():
    for v in (0, 1, 2, P - 1, 123456789):
        x = Fq(v)
        assert negate(negate(x)) == x
        assert negate(x) + x == 0
    assert negate(Fq(1)).n == P - 1
    assert negate(Fq(0)).n == 0


def test_bytes_roundtrip():
    x = Fq(0xDEADBEEF)
    b = x.to_bytes()
    assert len(b) == 32
    assert Fq.from_bytes(b, strict_len=True) == x
    assert x.to_hex().endswith("deadbeef")
    with pytest.raises(Groth16SolError):
        Fq.from_bytes(b"\x01" * 33)
    with pytest.raises(Groth16SolError):
        Fq.from_bytes(b"\x01", strict_len=True)


def test_fq2_arithmetic():
    u = Fq2.from_ints(0, 1)
    assert u * u == Fq2.from_ints(P - 1, 0)
    x = Fq2.from_ints(5, 9)
    assert x * x.inv() == Fq2.one()
    assert x / x == Fq2.one()
    assert -x + x == Fq2.zero()
    assert (x - x).is_zero()
    with pytest.raises(ZeroDivisionError):
        Fq2.zero().inv()
