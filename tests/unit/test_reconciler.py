"""
Unit tests for the reconciler and resource storage.
"""

import json

import pytest

from translation_autocomplete.errors import ReadError, ValidationError
from translation_autocomplete.localization import MissingEntry, Reconciler, ResourceStore


def dict_loader(trees):
    async def _load(language):
        return trees.get(language)
    return _load


class TestReconciler:
    """Test Reconciler.check()."""

    @pytest.fixture
    def reconciler(self):
        return Reconciler()

    async def test_all_targets_missing(self, reconciler, source_tree):
        entries = await reconciler.check(source_tree, ["tr", "fr"], dict_loader({}))

        assert entries == [
            MissingEntry("home.title", "Welcome", ["tr", "fr"]),
            MissingEntry("home.description", "Hello World", ["tr", "fr"]),
        ]

    async def test_partial_target(self, reconciler, source_tree):
        loader = dict_loader({"tr": {"home": {"title": "Hoşgeldin"}}})

        entries = await reconciler.check(source_tree, ["tr", "fr"], loader)

        assert [e.key for e in entries] == ["home.title", "home.description"]
        assert entries[0].missing_languages == ["fr"]
        assert entries[1].missing_languages == ["tr", "fr"]

    async def test_missing_languages_follow_target_order(self, reconciler, source_tree):
        loader = dict_loader({"tr": {"home": {"title": "Hoşgeldin"}}})

        entries = await reconciler.check(source_tree, ["fr", "tr"], loader)

        description = next(e for e in entries if e.key == "home.description")
        assert description.missing_languages == ["fr", "tr"]

    async def test_complete_targets_produce_no_entries(self, reconciler, source_tree):
        loader = dict_loader({"tr": source_tree, "fr": source_tree})

        assert await reconciler.check(source_tree, ["tr", "fr"], loader) == []

    async def test_empty_string_counts_as_missing(self, reconciler, source_tree):
        loader = dict_loader({"tr": {"home": {"title": "", "description": "Merhaba"}}})

        entries = await reconciler.check(source_tree, ["tr"], loader)

        assert [(e.key, e.missing_languages) for e in entries] == [("home.title", ["tr"])]

    async def test_null_counts_as_missing(self, reconciler, source_tree):
        loader = dict_loader({"tr": {"home": {"title": None, "description": "Merhaba"}}})

        entries = await reconciler.check(source_tree, ["tr"], loader)

        assert [(e.key, e.missing_languages) for e in entries] == [("home.title", ["tr"])]

    async def test_falsy_values_are_translations(self, reconciler):
        source = {"count": 1, "enabled": True}
        loader = dict_loader({"tr": {"count": 0, "enabled": False}})

        assert await reconciler.check(source, ["tr"], loader) == []

    async def test_entries_follow_source_order(self, reconciler):
        source = {"a": "A", "b": "B"}
        loader = dict_loader({"tr": {"a": "A-tr"}, "fr": {"b": "B-fr"}})

        entries = await reconciler.check(source, ["tr", "fr"], loader)

        assert [(e.key, e.missing_languages) for e in entries] == [("a", ["fr"]), ("b", ["tr"])]

    async def test_duplicate_languages_scanned_once(self, reconciler, source_tree):
        entries = await reconciler.check(source_tree, ["tr", "tr"], dict_loader({}))

        assert all(e.missing_languages == ["tr"] for e in entries)

    async def test_non_string_leaves(self, reconciler):
        source = {"list": ["a", "b"], "count": 3}

        entries = await reconciler.check(source, ["tr"], dict_loader({}))

        assert [(e.key, e.source_value) for e in entries] == [("list", '["a","b"]'), ("count", "3")]

    async def test_extra_target_keys_are_ignored(self, reconciler, source_tree):
        target = {"home": {"title": "T", "description": "D", "extra": "E"}}

        assert await reconciler.check(source_tree, ["tr"], dict_loader({"tr": target})) == []

    async def test_loader_errors_propagate(self, reconciler, source_tree):
        async def broken(language):
            raise ReadError("boom", language=language)

        with pytest.raises(ReadError):
            await reconciler.check(source_tree, ["tr"], broken)


class TestResourceStore:
    """Test ResourceStore."""

    def test_validate_missing_file(self, store):
        with pytest.raises(ValidationError, match="File not found"):
            store.validate("en")

    def test_validate_empty_file(self, store, i18n_dir):
        (i18n_dir / "en.json").write_text("", encoding="utf-8")

        with pytest.raises(ValidationError, match="Empty file"):
            store.validate("en")

    def test_validate_directory(self, store, i18n_dir):
        (i18n_dir / "en.json").mkdir()

        with pytest.raises(ValidationError, match="Invalid file"):
            store.validate("en")

    def test_validate_ok(self, store, write_locale, source_tree):
        path = write_locale("en", source_tree)

        assert store.validate("en") == path

    async def test_load_missing_returns_none(self, store):
        assert await store.load("tr") is None

    async def test_load_corrupt_file(self, store, i18n_dir):
        (i18n_dir / "tr.json").write_text("{not json", encoding="utf-8")

        with pytest.raises(ReadError) as exc_info:
            await store.load("tr")

        assert exc_info.value.context["language"] == "tr"
        assert "tr.json" in exc_info.value.message

    async def test_load_rejects_non_object(self, store, i18n_dir):
        (i18n_dir / "tr.json").write_text("[1, 2]", encoding="utf-8")

        with pytest.raises(ReadError):
            await store.load("tr")

    async def test_save_formatting(self, temp_dir):
        store = ResourceStore(temp_dir / "new" / "dir")

        path = await store.save("tr", {"home": {"title": "Hoşgeldin"}})

        assert path.read_text(encoding="utf-8") == '{\n  "home": {\n    "title": "Hoşgeldin"\n  }\n}\n'

    async def test_save_then_load(self, store):
        tree = {"a": {"b": "c"}}
        await store.save("fr", tree)

        assert await store.load("fr") == tree
        assert json.loads(store.path_for("fr").read_text(encoding="utf-8")) == tree
