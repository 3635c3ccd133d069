"""Unit tests for figtex.labels.registry and the label catalog.

Coverage: placeholder modes, collision fillers, uniqueness and determinism
of the registry, and catalog bookkeeping.
"""

from __future__ import annotations

import pytest

from figtex.labels import registry as registry_module
from figtex.labels.catalog import LabelCatalog, LabelRecord
from figtex.labels.registry import LabelMode, LabelRegistry, sanitize_text, short_name


class TestSanitizeText:
    """Test sanitize_text: markup-safe placeholder bases."""

    def test_replaces_unsafe_characters_with_dots(self) -> None:
        """Underscores and punctuation become dots; letters, digits, hyphens stay."""
        assert sanitize_text("u_S (t-1)") == "u.S .t-1."

    def test_collapses_whitespace(self) -> None:
        """Whitespace runs collapse to one space and edges are trimmed."""
        assert sanitize_text("  Max \t speed\n") == "Max speed"

    def test_markup_characters_removed(self) -> None:
        """None of the XML metacharacters survive."""
        result = sanitize_text("A & B < 3 > \"x\" 'y'")
        for char in "&<>\"'":
            assert char not in result


class TestShortName:
    """Test short_name: bijective base-26 counter names."""

    @pytest.mark.parametrize(
        ("index", "expected"),
        [(0, "a"), (25, "z"), (26, "aa"), (27, "ab"), (701, "zz"), (702, "aaa")],
    )
    def test_short_names(self, index: int, expected: str) -> None:
        assert short_name(index) == expected

    def test_negative_index_rejected(self) -> None:
        with pytest.raises(ValueError):
            short_name(-1)


class TestLabelRegistry:
    """Test LabelRegistry: collision-free placeholders for one run."""

    def test_sanitize_mode_resolves_collisions_with_fillers(self) -> None:
        """Repeated texts get filler suffixes in palette order."""
        registry = LabelRegistry()
        assert registry.register("Velocity") == "Velocity"
        assert registry.register("Velocity") == "Velocity."
        assert registry.register("Velocity") == "Velocity;"
        assert registry.register("Velocity") == "Velocity'"
        assert registry.register("Velocity") == "Velocity^"
        assert registry.register("Velocity") == "Velocity.."

    def test_padded_mode_appends_suffix(self) -> None:
        """Padded placeholders keep the original footprint plus a suffix."""
        registry = LabelRegistry()
        assert registry.register("Velocity", LabelMode.PADDED) == "Velocity..."
        assert registry.register("Velocity", "padded") == "Velocity...."

    def test_short_mode_uses_shared_counter(self) -> None:
        """Short names skip placeholders already taken by other modes."""
        registry = LabelRegistry()
        assert registry.register("a") == "a"
        assert registry.register("anything", LabelMode.SHORT) == "b"
        assert registry.register("else", LabelMode.SHORT) == "c"

    def test_empty_text_falls_back_to_short_name(self) -> None:
        """Texts that sanitize to nothing still get a placeholder."""
        registry = LabelRegistry()
        assert registry.register("   ") == "a"

    def test_placeholders_are_reserved_in_catalog(self) -> None:
        """Every returned placeholder is in the catalog's lookup set."""
        catalog = LabelCatalog()
        registry = LabelRegistry(catalog)
        placeholder = registry.register("Pressure")
        assert placeholder in catalog

    def test_uniqueness_over_many_calls(self) -> None:
        """N calls return N pairwise distinct placeholders."""
        registry = LabelRegistry()
        texts = ["x"] * 150 + ["x_1", "x.1", "x 1", "", "y"] * 10
        modes = [LabelMode.SANITIZE, LabelMode.SHORT, LabelMode.PADDED]
        placeholders = [registry.register(t, modes[i % 3]) for i, t in enumerate(texts)]
        assert len(set(placeholders)) == len(placeholders)

    def test_reset_replays_identically(self) -> None:
        """Resetting and replaying a request sequence reproduces it."""
        requests = [
            ("Velocity", LabelMode.PADDED),
            ("Velocity", LabelMode.SANITIZE),
            ("", LabelMode.SANITIZE),
            ("t [s]", LabelMode.SANITIZE),
            ("Velocity", LabelMode.SHORT),
            ("Velocity", LabelMode.SANITIZE),
        ]
        registry = LabelRegistry()
        first = [registry.register(t, m) for t, m in requests]
        registry.reset()
        second = [registry.register(t, m) for t, m in requests]
        assert first == second

    def test_collision_loop_is_bounded(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """A palette that cannot produce a free name fails loudly."""
        monkeypatch.setattr(registry_module, "MAX_COLLISION_ATTEMPTS", 1)
        registry = LabelRegistry()
        registry.register("Velocity")
        registry.register("Velocity")
        with pytest.raises(AssertionError):
            registry.register("Velocity")


class TestLabelCatalog:
    """Test LabelCatalog bookkeeping."""

    def test_insertion_order_preserved(self) -> None:
        catalog = LabelCatalog()
        for name in ("b", "a", "c"):
            catalog.add(LabelRecord(placeholder=name, original_text=name.upper()))
        assert [r.placeholder for r in catalog] == ["b", "a", "c"]
        assert catalog.get("a").original_text == "A"

    def test_duplicate_placeholder_rejected(self) -> None:
        catalog = LabelCatalog()
        catalog.add(LabelRecord(placeholder="a", original_text="A"))
        with pytest.raises(ValueError):
            catalog.add(LabelRecord(placeholder="a", original_text="B"))

    def test_baseline_font_size_is_most_common(self) -> None:
        """The run baseline is the most frequent size, first seen on ties."""
        catalog = LabelCatalog()
        for i, size in enumerate([10.0, 12.0, 12.0, 9.0]):
            catalog.add(LabelRecord(placeholder=str(i), original_text="x", font_size=size))
        assert catalog.baseline_font_size() == 12.0

        tied = LabelCatalog()
        tied.add(LabelRecord(placeholder="a", original_text="x", font_size=10.0))
        tied.add(LabelRecord(placeholder="b", original_text="x", font_size=12.0))
        assert tied.baseline_font_size() == 10.0
        assert LabelCatalog().baseline_font_size() is None

    def test_missing_lists_unmatched_records(self) -> None:
        catalog = LabelCatalog()
        found = catalog.add(LabelRecord(placeholder="a", original_text="A"))
        catalog.add(LabelRecord(placeholder="b", original_text="B"))
        found.found_in_output = True
        assert [r.placeholder for r in catalog.missing()] == ["b"]
