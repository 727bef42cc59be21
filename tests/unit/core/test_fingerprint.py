"""
Unit tests for message fingerprinting.
"""
import hashlib

from core.utils import MessageFingerprinter


class TestNormalize:

    def test_collapses_whitespace_and_casefolds(self):
        assert MessageFingerprinter.normalize("  Senior\tGo\n\nDeveloper  ") == "senior go developer"

    def test_nfkc(self):
        # full-width letters fold to ASCII
        assert MessageFingerprinter.normalize("ＧＯ") == "go"

    def test_none_is_empty(self):
        assert MessageFingerprinter.normalize(None) == ""


class TestCalculate:

    def test_is_sha256_of_normalized_text(self):
        expected = hashlib.sha256("senior go developer".encode("utf-8")).hexdigest()
        assert MessageFingerprinter.calculate("Senior  GO developer ") == expected

    def test_formatting_differences_share_a_hash(self):
        a = MessageFingerprinter.calculate("Ищем Go разработчика\n\nУдалённо")
        b = MessageFingerprinter.calculate("ищем go   разработчика удалённо")
        assert a == b

    def test_different_text_differs(self):
        assert MessageFingerprinter.calculate("Go developer") != MessageFingerprinter.calculate("Rust developer")


class TestSourceKey:

    def test_both_present(self):
        assert MessageFingerprinter.source_key("-100123", 42) == "-100123:42"

    def test_missing_part_gives_none(self):
        assert MessageFingerprinter.source_key(None, 42) is None
        assert MessageFingerprinter.source_key("-100123", None) is None
        assert MessageFingerprinter.source_key(" ", 42) is None
