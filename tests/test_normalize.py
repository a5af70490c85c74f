"""Tests de normalisation."""

from certimatch.normalize import compact, normalize, safe_str, tokens


def test_normalize_basic() -> None:
    # Espaces multiples → espace simple, lower, strip
    assert normalize("  John  Doe  ") == "john doe"
    assert normalize("JOHN DOE") == "john doe"


def test_normalize_separators() -> None:
    assert normalize("John_Doe") == "john doe"
    assert normalize("John-Doe") == "john doe"
    assert normalize("John.Doe") == "john doe"
    assert normalize("Doe, John") == "doe john"
    assert normalize("a\t\n  b") == "a b"


def test_normalize_extension() -> None:
    assert normalize("John_Doe.pdf") == "john doe"
    assert normalize("JohnDoe.PDF") == "johndoe"
    assert normalize("John_Doe.docx") == "john doe"
    assert normalize("JohnDoe") == "johndoe"


def test_normalize_filler_tokens() -> None:
    assert normalize("Certificate_John-Doe.pdf") == "john doe"
    assert normalize("Cert-JaneSmith.pdf") == "janesmith"
    assert normalize("Certificate_Document_JohnDoe.pdf") == "johndoe"
    assert normalize("Certificate_of_Completion_Alice.pdf") == "alice"
    assert normalize("Alice_Certificate_2024.pdf") == "alice 2024"


def test_normalize_filler_only() -> None:
    assert normalize("certificate.pdf") == ""
    assert normalize("Doc.pdf") == ""


def test_normalize_custom_fillers() -> None:
    assert normalize("Award_Alice.pdf") == "alice"
    assert normalize("Award_Alice.pdf", filler_tokens=()) == "award alice"


def test_normalize_diacritics_and_nfkc() -> None:
    assert normalize("Cert_José_García.pdf") == "jose garcia"
    assert normalize("François Müller") == "francois muller"
    assert normalize("ﬁn") == "fin"  # ligature -> fi


def test_normalize_empty() -> None:
    assert normalize("") == ""
    assert normalize("   ") == ""
    assert normalize(None) == ""
    assert normalize(float("nan")) == ""
    assert normalize("_-_.") == ""


def test_normalize_numbers_kept() -> None:
    assert normalize("User_2024") == "user 2024"


def test_compact_and_tokens() -> None:
    assert compact("john doe") == "johndoe"
    assert compact("") == ""
    assert tokens("john doe") == frozenset({"john", "doe"})
    assert tokens("") == frozenset()


def test_safe_str() -> None:
    assert safe_str(None) == ""
    assert safe_str(float("nan")) == ""
    assert safe_str(12) == "12"
