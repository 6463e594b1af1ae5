# tests/stores/test_sqlite_external.py
"""Tests for the SQLite external library store."""

import sqlite3

import pytest

from atomforge.models import RegistryEntry


@pytest.fixture
def three():
    return RegistryEntry(
        name="three",
        display_name="Three.js",
        package_name="three",
        version="0.160.0",
        cdn_url="https://cdn.jsdelivr.net/npm/three@0.160.0/build/three.module.js",
        global_name="THREE",
        load_type="module",
        module_imports={"three/addons/": "https://cdn.jsdelivr.net/npm/three@0.160.0/examples/jsm/"},
    )


@pytest.fixture
def howler():
    return RegistryEntry(
        name="howler",
        display_name="Howler",
        package_name="howler",
        version="2.2.4",
        cdn_url="https://cdn.jsdelivr.net/npm/howler@2.2.4/dist/howler.min.js",
        global_name="Howl",
        description="Audio",
    )


class TestRegistry:
    def test_register_and_get(self, external_store, three):
        external_store.register(three)
        assert external_store.get_entry("three") == three

    def test_get_missing(self, external_store):
        assert external_store.get_entry("nope") is None

    def test_register_replaces(self, external_store, howler):
        external_store.register(howler)
        external_store.register(howler.model_copy(update={"version": "2.3.0"}))

        assert external_store.get_entry("howler").version == "2.3.0"
        assert len(external_store.list_registry()) == 1

    def test_list_ordered_by_name(self, external_store, three, howler):
        external_store.register(three)
        external_store.register(howler)
        assert [e.name for e in external_store.list_registry()] == ["howler", "three"]

    def test_defaults_round_trip(self, external_store, howler):
        external_store.register(howler)
        entry = external_store.get_entry("howler")
        assert entry.load_type == "script"
        assert entry.module_imports is None


class TestInstalls:
    def test_install_and_list(self, external_store, three, howler):
        external_store.register(three)
        external_store.register(howler)

        installed = external_store.install("g1", "three")
        external_store.install("g1", "howler")

        assert installed.name == "three"
        assert installed.module_imports == three.module_imports
        assert [e.name for e in external_store.list_installed("g1")] == ["three", "howler"]
        assert external_store.list_installed("g2") == []

    def test_install_twice_rejected(self, external_store, howler):
        external_store.register(howler)
        external_store.install("g1", "howler")
        with pytest.raises(sqlite3.IntegrityError):
            external_store.install("g1", "howler")

    def test_uninstall(self, external_store, howler):
        external_store.register(howler)
        external_store.install("g1", "howler")

        assert external_store.uninstall("g1", "howler") is True
        assert external_store.uninstall("g1", "howler") is False
        assert external_store.list_installed("g1") == []


class TestReadInstalled:
    def test_returns_api_surface_of_installed(self, external_store, howler, three):
        external_store.register(howler.model_copy(update={"api_surface": "new Howl({ src })"}))
        external_store.register(three)
        external_store.install("g1", "howler")
        external_store.install("g1", "three")

        read = external_store.read_installed("g1", ["three", "howler", "matter"])

        assert [e.name for e in read] == ["howler", "three"]
        assert read[0].api_surface == "new Howl({ src })"
        assert read[1].api_surface is None

    def test_skips_registered_but_not_installed(self, external_store, howler):
        external_store.register(howler.model_copy(update={"api_surface": "Howl"}))
        assert external_store.read_installed("g1", ["howler"]) == []

    def test_empty_names(self, external_store):
        assert external_store.read_installed("g1", []) == []

    def test_listings_leave_out_api_surface(self, external_store, howler):
        external_store.register(howler.model_copy(update={"api_surface": "Howl"}))
        installed = external_store.install("g1", "howler")

        assert installed.api_surface is None
        assert external_store.list_registry()[0].api_surface is None
        assert external_store.list_installed("g1")[0].api_surface is None
