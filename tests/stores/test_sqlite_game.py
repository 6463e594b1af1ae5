# tests/stores/test_sqlite_game.py
"""Tests for SQLite game store."""

import sqlite3

import pytest

from atomforge.stores import SQLiteGameStore


class TestSQLiteGameStore:
    def test_create_and_get(self, game_store):
        game = game_store.create("asteroids", "Shoot rocks")

        fetched = game_store.get(game.id)
        assert fetched is not None
        assert fetched.name == "asteroids"
        assert fetched.description == "Shoot rocks"
        assert fetched.active_build_id is None

    def test_get_by_name(self, game_store):
        game = game_store.create("pong")
        assert game_store.get_by_name("pong").id == game.id
        assert game_store.get_by_name("tetris") is None

    def test_get_missing(self, game_store):
        assert game_store.get("nope") is None

    def test_duplicate_name_rejected(self, game_store):
        game_store.create("pong")
        with pytest.raises(sqlite3.IntegrityError):
            game_store.create("pong")

    def test_list_oldest_first(self, game_store):
        game_store.create("first")
        game_store.create("second")
        assert [g.name for g in game_store.list_games()] == ["first", "second"]

    def test_set_active_build_last_writer_wins(self, game_store):
        game = game_store.create("pong")
        game_store.set_active_build(game.id, "b1")
        game_store.set_active_build(game.id, "b2")

        fetched = game_store.get(game.id)
        assert fetched.active_build_id == "b2"
        assert fetched.updated_at >= game.updated_at

    def test_persists(self, db_path):
        SQLiteGameStore(db_path).create("pong")
        assert SQLiteGameStore(db_path).get_by_name("pong") is not None
