# src/atomforge/bundle.py
"""Rendering of build artifacts: the JavaScript bundle and its manifest."""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime

from atomforge.models import Atom, InstalledExternal

LATEST_BUNDLE = "latest.js"
MANIFEST = "manifest.json"
ENTRY_POINT_NAMES = ("game_loop", "main")

JS_CONTENT_TYPE = "application/javascript"
JSON_CONTENT_TYPE = "application/json"


@dataclass(frozen=True)
class ArtifactPaths:
    """Blob paths written by one build, namespaced by game name."""

    latest: str
    versioned: str
    manifest: str


def artifact_paths(game_name: str, build_id: str) -> ArtifactPaths:
    return ArtifactPaths(
        latest=f"{game_name}/{LATEST_BUNDLE}",
        versioned=f"{game_name}/build_{build_id}.js",
        manifest=f"{game_name}/{MANIFEST}",
    )


def select_entry_point(order: Sequence[str], atoms: Mapping[str, Atom]) -> str | None:
    """Pick the core atom to call at boot.

    A core atom named `game_loop` or `main` wins; otherwise the last core atom
    in build order. Returns None when there is no core atom.
    """
    core = [name for name in order if atoms[name].type == "core"]
    for name in core:
        if name in ENTRY_POINT_NAMES:
            return name
    return core[-1] if core else None


def _indent(code: str) -> str:
    return "\n".join(f"  {line}" if line.strip() else line for line in code.split("\n"))


def render_bundle(
    game_name: str,
    atoms: Mapping[str, Atom],
    order: Sequence[str],
    built_at: datetime,
) -> str:
    """Concatenate atom code in build order inside a strict-mode IIFE.

    Each atom gets a `// --- [type] name ---` header. The wrapper keeps atom
    names out of the global scope so several bundles can share a page.
    """
    sections = []
    for name in order:
        atom = atoms[name]
        sections.append(f"  // --- [{atom.type}] {name} ---\n{_indent(atom.code)}")

    entry = select_entry_point(order, atoms)
    if entry is None:
        boot = "\n  // No entry point found (no 'core' atom)"
    else:
        boot = f"\n  // Boot\n  if (typeof {entry} === 'function') {entry}();"

    return "\n".join(
        [
            "// === Atomic Coding Bundle ===",
            f"// Game: {game_name}",
            f"// Generated: {built_at.isoformat()}",
            f"// Atoms: {len(order)}",
            f"// Order: {' -> '.join(order)}",
            "(function() {",
            '  "use strict";',
            "",
            "\n\n".join(sections),
            boot,
            "})();",
        ]
    )


def render_manifest(externals: Sequence[InstalledExternal], built_at: datetime) -> str:
    """Render the manifest a loader reads before fetching the bundle."""
    entries = []
    for ext in externals:
        entry: dict[str, object] = {
            "name": ext.name,
            "cdn_url": ext.cdn_url,
            "global_name": ext.global_name,
            "load_type": ext.load_type,
        }
        if ext.module_imports:
            entry["module_imports"] = ext.module_imports
        entries.append(entry)

    manifest = {
        "externals": entries,
        "bundle_url": LATEST_BUNDLE,
        "built_at": built_at.isoformat(),
    }
    return json.dumps(manifest, indent=2)
