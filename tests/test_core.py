import pytest

from passwatch.core import COMMON_PASSWORDS, ReasonCode, character_classes, classify, is_in_scope


def test_common_passwords_are_weak_case_insensitive():
    for pwd in COMMON_PASSWORDS:
        for variant in (pwd, pwd.upper(), pwd.capitalize()):
            v = classify(variant)
            assert v.is_weak is True
            assert ReasonCode.COMMON_LIST in v.reasons


def test_reasons_accumulate():
    v = classify("password123")
    assert v.reasons == {ReasonCode.COMMON_LIST, ReasonCode.SHORT_LENGTH}


@pytest.mark.parametrize("pwd", ["A1!", "Pass1!", "Secret12", "Abcd123!", "Short1!", "Weak12", "Password1"])
def test_short_passwords_are_weak(pwd):
    v = classify(pwd)
    assert v.is_weak
    assert ReasonCode.SHORT_LENGTH in v.reasons


def test_length_boundary():
    twelve = "A1b!C2d@E3f#"
    assert len(twelve) == 12
    assert classify(twelve).reasons == {ReasonCode.SHORT_LENGTH}

    thirteen = "A1b!C2d@E3f#g"
    assert len(thirteen) == 13
    assert classify(thirteen).is_weak is False

    assert classify("abcdefgHIJKLM").is_weak is False


@pytest.mark.parametrize("pwd", [
    "abcdefghijklmnop",
    "ABCDEFGHIJKLMNOP",
    "12345678901234",
    "!@#$%^&*()_+-=",
    "abcdefghijklm",
    "abcdefghijklmnopqrstuvwxyz",
])
def test_single_character_class_is_weak_regardless_of_length(pwd):
    v = classify(pwd)
    assert v.is_weak
    assert ReasonCode.SINGLE_CHARACTER_CLASS in v.reasons


def test_empty_password_is_weak():
    v = classify("")
    assert v.is_weak
    assert v.reasons == {ReasonCode.SHORT_LENGTH, ReasonCode.SINGLE_CHARACTER_CLASS}
    assert classify(None) == v


@pytest.mark.parametrize("pwd", [
    "MyStr0ng!P@ssw0rd2024",
    "C0mplex&Secure#Pass",
    "Unbreakable$123Password",
    "V3ry$ecure#P@ssw0rd!",
    "Str0ng&C0mplex#2024",
])
def test_strong_passwords(pwd):
    v = classify(pwd)
    assert v.is_weak is False
    assert v.reasons == frozenset()


def test_custom_common_list():
    assert ReasonCode.COMMON_LIST in classify("Correct-Horse-Battery", ["correct-horse-battery"]).reasons
    assert classify("Correct-Horse-Battery", []).is_weak is False


def test_classification_is_repeatable():
    assert classify("Weak12") == classify("Weak12")


def test_character_classes():
    assert character_classes("") == 0
    assert character_classes("aB") == 2
    assert character_classes("aB3 ") == 3
    assert character_classes("aB3!") == 4
    assert character_classes("Éé") == 2


@pytest.mark.parametrize("identity", [
    "bob.smith@culture.ai",
    "test.user+tag@culture.ai",
    "Alice.Jones@CULTURE.AI",
    "user123@culture.ai",
])
def test_corporate_identities_in_scope(identity):
    assert is_in_scope(identity, "@culture.ai") is True


@pytest.mark.parametrize("identity", [
    "user@gmail.com",
    "someone@notculture.ai",
    "user@culture.ai.evil.com",
    "culture.ai",
    "",
    None,
])
def test_other_identities_out_of_scope(identity):
    assert is_in_scope(identity, "@culture.ai") is False


def test_empty_suffix_is_never_in_scope():
    assert is_in_scope("bob@culture.ai", "") is False


@pytest.mark.parametrize("pwd", [
    "correct horse battery staple",
    "cafécafécafécafé",
    "ÉCOLEÉCOLEÉCOLE",
    "1234 5678 9012 3456",
])
def test_spaces_and_accented_letters_add_no_class(pwd):
    v = classify(pwd)
    assert v.is_weak
    assert ReasonCode.SINGLE_CHARACTER_CLASS in v.reasons


def test_accented_letters_count_by_case():
    assert classify("Cafécafécafécafé").is_weak is False


@pytest.mark.parametrize("pwd", ["Corp0rate!Winter2024", "corp0rate!winter2024", "CORP0RATE!WINTER2024"])
def test_mixed_case_frozenset_common_list(pwd):
    v = classify(pwd, frozenset({"Corp0rate!Winter2024"}))
    assert v.is_weak
    assert v.reasons == {ReasonCode.COMMON_LIST}


def test_trailing_whitespace_identity_is_not_stripped():
    assert is_in_scope("bob.smith@culture.ai ", "@culture.ai") is False
