from groth16_sol.errors import (ErrorCode, Groth16SolError, InvalidVerificationKey,
                                MalformedPoint, ParseError, ProofInvalid,
                                PublicInputNotInField, UndefinedCoordinates,
                                VerificationError)


def test_str_and_dict():
    e = InvalidVerificationKey("gamma_abc_g1 is empty", field_name="gamma_abc_g1")
    assert str(e) == "[INVALID_VERIFICATION_KEY] gamma_abc_g1 is empty ctx={'field': 'gamma_abc_g1'}"
    d = e.to_dict()
    assert d == {
        "code": "INVALID_VERIFICATION_KEY",
        "msg": "gamma_abc_g1 is empty",
        "ctx": {"field": "gamma_abc_g1"},
    }
    back = Groth16SolError.from_dict(d)
    assert back.code is ErrorCode.INVALID_VERIFICATION_KEY
    assert back.ctx == d["ctx"]


def test_unknown_code_survives_round_trip():
    e = Groth16SolError.from_dict({"code": "SOMETHING_ELSE", "msg": "x"})
    assert e.code == "SOMETHING_ELSE"
    assert str(e) == "[SOMETHING_ELSE] x"


def test_cause_is_chained():
    inner = UndefinedCoordinates("G1")
    e = InvalidVerificationKey("alpha_g1 is the point at infinity", field_name="alpha_g1", cause=inner)
    assert e.__cause__ is inner
    assert "cause=" in str(e)


def test_with_context_mutates_and_returns_self():
    e = ParseError("12a")
    assert e.with_context(index=3) is e
    assert e.ctx == {"value": "12a", "index": 3}


def test_parse_error_shortens_long_values():
    e = ParseError("9" * 200)
    assert len(e.ctx["value"]) == 96
    assert ParseError(12).ctx["value"] == "int"


def test_hierarchy():
    assert issubclass(PublicInputNotInField, VerificationError)
    assert issubclass(ProofInvalid, VerificationError)
    assert PublicInputNotInField().code == "PublicInputNotInField"
    assert ProofInvalid().code == "ProofInvalid"
    assert MalformedPoint(group="G2").ctx == {"group": "G2"}
    # usable in sets / as dict keys
    assert len({ProofInvalid(), ProofInvalid()}) == 2
