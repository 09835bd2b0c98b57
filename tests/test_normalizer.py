import unicodedata

from catalog.normalizer import normalize_terms, normalize_text, sort_key


class TestNormalizeText:
    """Test lower-casing and accent folding."""

    def test_acute_accents(self):
        """Test folding of acute accents."""
        assert normalize_text("Ingeniería") == "ingenieria"

    def test_enye(self):
        """Test that ñ folds to n."""
        assert normalize_text("Diseño") == "diseno"

    def test_other_diacritics_fold_the_same(self):
        """Test grave, diaeresis and circumflex folding."""
        assert normalize_text("àäâ èëê ìïî òöô ùüû") == "aaa eee iii ooo uuu"

    def test_uppercase_accents(self):
        """Test folding of upper-case accented letters."""
        assert normalize_text("ÁREA ÑANDÚ") == "area nandu"

    def test_decomposed_accents(self):
        """Test that NFD text (base letter + combining mark) folds too."""
        assert normalize_text(unicodedata.normalize("NFD", "Ingeniería Diseño")) == "ingenieria diseno"


class TestNormalizeTerms:
    """Test splitting a query into search terms."""

    def test_accented_word(self):
        """Test that an accented word yields its plain term."""
        assert "ingenieria" in normalize_terms("Ingeniería")

    def test_short_tokens_dropped(self):
        """Test that tokens of two characters or fewer are dropped."""
        # "an" has length 2, so nothing survives
        assert normalize_terms("a an") == []

    def test_three_letters_kept(self):
        """Test that three-letter tokens are kept."""
        assert normalize_terms("ing de sis") == ["ing", "sis"]

    def test_duplicates_removed(self):
        """Test that repeated terms collapse to one."""
        terms = normalize_terms("Medicina medicina MEDICINA")
        assert terms == ["medicina"]

    def test_accent_variants_deduplicate(self):
        """Test that accented and plain spellings collapse to one."""
        assert normalize_terms("Ingeniería ingenieria") == ["ingenieria"]

    def test_decomposed_query(self):
        """Test that a query pasted in NFD yields the accent-free term."""
        assert normalize_terms(unicodedata.normalize("NFD", "Ingeniería")) == ["ingenieria"]

    def test_multiple_terms(self):
        """Test a multi-word query."""
        assert set(normalize_terms("ingeniería de sistemas")) == {"ingenieria", "sistemas"}

    def test_empty_and_blank(self):
        """Test that empty, blank and None input give no terms."""
        assert normalize_terms("") == []
        assert normalize_terms("   \t\n") == []
        assert normalize_terms(None) == []

    def test_any_whitespace_splits(self):
        """Test splitting on tabs and newlines."""
        assert normalize_terms("derecho\tmedicina\nsalud") == ["derecho", "medicina", "salud"]


class TestSortKey:
    """Test locale-aware, case-insensitive ordering."""

    def test_case_insensitive(self):
        """Test that ordering ignores case."""
        values = ["zoología", "Arte", "biología"]
        assert sorted(values, key=sort_key) == ["Arte", "biología", "zoología"]

    def test_accents_do_not_push_to_end(self):
        """Test that accented values sort with their base letter."""
        values = ["Virtual", "Híbrida", "Presencial"]
        assert sorted(values, key=sort_key) == ["Híbrida", "Presencial", "Virtual"]

    def test_leading_accent(self):
        """Test a value starting with an accented letter."""
        values = ["Economía", "Álgebra", "Biología"]
        assert sorted(values, key=sort_key) == ["Álgebra", "Biología", "Economía"]
