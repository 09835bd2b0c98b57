from catalog.models import SearchFilters
from catalog.predicates import And, Contains, Equals, Or, build_predicate, text_clause
from catalog.sorting import is_ascending, resolve_sort_column


class TestBuildPredicate:
    """Test translation of SearchFilters into predicates."""

    def test_no_filters_is_none(self):
        """Test that no filters give no predicate."""
        assert build_predicate(SearchFilters()) is None

    def test_blank_query_omitted(self):
        """Test that a blank query adds no condition."""
        assert build_predicate(SearchFilters(q="   ")) is None

    def test_query_of_short_words_omitted(self):
        """Test that a query of short words adds no condition."""
        assert build_predicate(SearchFilters(q="a de")) is None

    def test_single_term_spans_three_columns(self):
        """Test that one term is matched on name, institution and area."""
        predicate = build_predicate(SearchFilters(q="Medicina"))
        assert predicate == And((
            Or((
                Contains("carrera", "medicina"),
                Contains("institucion", "medicina"),
                Contains("clasificacion", "medicina"),
            )),
        ))

    def test_terms_are_ored_not_anded(self):
        """Test that multiple terms are ORed together."""
        predicate = build_predicate(SearchFilters(q="ingeniería sistemas"))
        (clause,) = predicate.clauses
        assert isinstance(clause, Or)
        assert len(clause.clauses) == 6
        assert Contains("carrera", "ingenieria") in clause.clauses
        assert Contains("clasificacion", "sistemas") in clause.clauses

    def test_modality_and_institution_are_exact(self):
        """Test exact modality and institution filters."""
        predicate = build_predicate(SearchFilters(modalidad="Virtual", institucion="SENA"))
        assert predicate == And((Equals("modalidad", "Virtual"), Equals("institucion", "SENA")))

    def test_level_and_area_are_substrings(self):
        """Test substring level and area filters."""
        predicate = build_predicate(SearchFilters(nivel="profes", area="Salud"))
        assert predicate == And((
            Contains("nivel_programa", "profes"),
            Contains("clasificacion", "Salud"),
        ))

    def test_everything_anded_at_top_level(self):
        """Test that all conditions are ANDed at the top level."""
        predicate = build_predicate(SearchFilters(
            q="medicina", modalidad="Presencial", institucion="Universidad del Rosario",
            nivel="Profesional", area="Salud",
        ))
        assert isinstance(predicate, And)
        assert len(predicate.clauses) == 5
        assert predicate.clauses[0] == text_clause(["medicina"])

    def test_predicates_are_hashable_values(self):
        """Test that equal filters build equal, hashable predicates."""
        a = build_predicate(SearchFilters(q="derecho", modalidad="Virtual"))
        b = build_predicate(SearchFilters(q="derecho", modalidad="Virtual"))
        assert a == b
        assert hash(a) == hash(b)


class TestSortResolver:
    """Test public sort keys → storage columns."""

    def test_known_keys(self):
        """Test every public sort key."""
        assert resolve_sort_column("nombre") == "carrera"
        assert resolve_sort_column("carrera") == "carrera"
        assert resolve_sort_column("institucion") == "institucion"
        assert resolve_sort_column("modalidad") == "modalidad"
        assert resolve_sort_column("duracion") == "duracion_semestres"
        assert resolve_sort_column("precio") == "valor_semestre"
        assert resolve_sort_column("nivel") == "nivel_programa"

    def test_unknown_key_falls_back_to_name(self):
        """Test that unknown sort keys fall back to the name."""
        assert resolve_sort_column("bogus") == "carrera"
        assert resolve_sort_column("") == "carrera"
        assert resolve_sort_column(None) == "carrera"

    def test_keys_are_case_sensitive(self):
        """Test that sort keys are case-sensitive."""
        assert resolve_sort_column("PRECIO") == "carrera"

    def test_only_exact_desc_descends(self):
        """Test that only "desc" sorts descending."""
        assert is_ascending("desc") is False
        assert is_ascending("asc") is True
        assert is_ascending("DESC") is True
        assert is_ascending("descending") is True
        assert is_ascending(None) is True
