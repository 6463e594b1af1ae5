# tests/models/test_atom.py
"""Tests for atom models."""

import pytest
from pydantic import ValidationError

from atomforge.models import Atom, AtomSearchResult, AtomSummary, Port, format_signature


class TestPort:
    def test_format(self):
        assert Port(name="x", type="number").format() == "x: number"

    def test_format_optional(self):
        assert Port(name="dt", type="number", optional=True).format() == "dt: number?"

    def test_frozen(self):
        port = Port(name="x", type="number")
        with pytest.raises(ValidationError):
            port.name = "y"  # type: ignore[misc]


class TestFormatSignature:
    def test_no_outputs_is_void(self):
        sig = format_signature([Port(name="dt", type="number")], [])
        assert sig == "(dt: number) => void"

    def test_single_output_is_bare_type(self):
        inputs = [Port(name="v", type="number"), Port(name="lo", type="number")]
        sig = format_signature(inputs, [Port(name="result", type="number")])
        assert sig == "(v: number, lo: number) => number"

    def test_multiple_outputs_is_object_shape(self):
        outputs = [Port(name="x", type="number"), Port(name="y", type="number", optional=True)]
        assert format_signature([], outputs) == "() => { x: number, y: number? }"


class TestAtom:
    def test_defaults(self):
        atom = Atom(name="math_clamp", type="util", code="function math_clamp() {}")
        assert atom.version == 1
        assert atom.inputs == []
        assert atom.depends_on == []
        assert atom.description is None

    def test_signature_property(self):
        atom = Atom(
            name="vec_len",
            type="util",
            code="function vec_len(x, y) { return Math.hypot(x, y); }",
            inputs=[Port(name="x", type="number"), Port(name="y", type="number")],
            outputs=[Port(name="length", type="number")],
        )
        assert atom.signature == "(x: number, y: number) => number"

    def test_invalid_type_rejected(self):
        with pytest.raises(ValidationError):
            Atom(name="a", type="helper", code="")  # type: ignore[arg-type]

    def test_is_summary(self):
        atom = Atom(name="a", type="core", code="")
        assert isinstance(atom, AtomSummary)


class TestAtomSearchResult:
    def test_version_is_zero(self):
        result = AtomSearchResult(name="a", type="util", code="", similarity=0.8)
        assert result.version == 0
        assert result.similarity == 0.8
