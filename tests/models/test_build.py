# tests/models/test_build.py
"""Tests for build and snapshot models."""

from atomforge.models import (
    AtomSnapshot,
    Build,
    BuildStatus,
    Dependency,
    Port,
    SnapshotAtom,
)


class TestBuildStatus:
    def test_string_values(self):
        assert BuildStatus("success") is BuildStatus.SUCCESS


class TestBuild:
    def test_new_build_is_building(self):
        build = Build(game_id="g1")
        assert build.status == BuildStatus.BUILDING
        assert build.atom_snapshot is None
        assert build.build_log == []
        assert build.id

    def test_unique_ids(self):
        assert Build(game_id="g1").id != Build(game_id="g1").id


class TestAtomSnapshot:
    def test_atom_names_in_order(self):
        snapshot = AtomSnapshot(
            atoms=(
                SnapshotAtom(name="b", type="util", code="b"),
                SnapshotAtom(name="a", type="core", code="a"),
            )
        )
        assert snapshot.atom_names == ["b", "a"]

    def test_json_preserves_ports_and_edges(self):
        snapshot = AtomSnapshot(
            atoms=(
                SnapshotAtom(
                    name="player_jump",
                    type="feature",
                    code="function player_jump() {}",
                    description="Jump",
                    inputs=(Port(name="force", type="number", optional=True),),
                ),
            ),
            dependencies=(Dependency(atom_name="player_jump", depends_on="math_clamp"),),
        )
        restored = AtomSnapshot.model_validate_json(snapshot.model_dump_json())
        assert restored == snapshot
        assert restored.atoms[0].inputs[0].optional is True

    def test_empty(self):
        snapshot = AtomSnapshot()
        assert snapshot.atoms == ()
        assert snapshot.dependencies == ()
