import re

from app.application.services.code_generator import CodeGenerator


def test_generates_ten_thousand_zero_padded_six_digit_codes():
    gen = CodeGenerator()
    codes = [gen.generate() for _ in range(10_000)]
    assert all(re.fullmatch(r"\d{6}", c) for c in codes)
    assert all("000000" <= c <= "999999" for c in codes)
    # a uniform source over a million values does not collapse to a handful
    assert len(set(codes)) > 9_000


def test_zero_padding_for_small_values(monkeypatch):
    from app.application.services import code_generator as mod
    monkeypatch.setattr(mod.secrets, "randbelow", lambda n: 42)
    assert CodeGenerator().generate() == "000042"


def test_custom_length():
    assert len(CodeGenerator(length=8).generate()) == 8
