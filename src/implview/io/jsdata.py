"""Read and write generated ``implementors/**/trait.*.js`` files.

File layout (one crate per line):

    (function() {var implementors = {
    "crate_a":[["impl ... for ..."]],
    "crate_b":[]
    };if (window.register_implementors) {window.register_implementors(implementors);} else {window.pending_implementors = implementors;}})()

The object literal is valid JSON, so decoding is a JSON decode of the value
assigned to ``implementors``. Descriptors are kept exactly as decoded.
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import TYPE_CHECKING, Iterator

from ..core.errors import ImplementorFileError
from ..core.host import ImplementorMap
from ..core.loader import ImplementorLoader, validate_mapping
from ..core.logging import get_logger

if TYPE_CHECKING:
    from ..core.store import ImplementorStore

log = get_logger(__name__)

IMPLEMENTORS_DIR = "implementors"

_PRELUDE = "(function() {var implementors = "
_HANDOFF = (
    "if (window.register_implementors) {window.register_implementors(implementors);} "
    "else {window.pending_implementors = implementors;}})()"
)
_ASSIGN_RE = re.compile(r"\bvar\s+implementors\s*=\s*")


def trait_path_from_file(path: str | Path, root: str | Path | None = None) -> str:
    """Map ``.../implementors/core/ops/drop/trait.Drop.js`` to ``core/ops/drop/trait.Drop``.

    With ``root`` the path is taken relative to it (``root`` being the
    ``implementors`` directory itself). Without it, everything after the last
    ``implementors`` path component is used.
    """

    p = Path(path)
    if root is not None:
        parts = p.resolve().relative_to(Path(root).resolve()).parts
    else:
        parts = p.parts
        if IMPLEMENTORS_DIR in parts:
            idx = len(parts) - 1 - parts[::-1].index(IMPLEMENTORS_DIR)
            parts = parts[idx + 1 :]
        else:
            parts = parts[-1:]
    if not parts:
        raise ValueError(f"Cannot derive a trait path from {str(path)!r}")

    *dirs, name = parts
    if name.endswith(".js"):
        name = name[: -len(".js")]
    return "/".join([*dirs, name])


def parse_implementors_js(text: str, *, source: str | None = None) -> dict:
    """Decode the implementor mapping embedded in a generated script."""

    m = _ASSIGN_RE.search(text)
    if m is None:
        raise ImplementorFileError("no `var implementors = {...}` assignment found", path=source)

    try:
        mapping, _end = json.JSONDecoder().raw_decode(text, m.end())
    except json.JSONDecodeError as e:
        raise ImplementorFileError(f"malformed implementors literal: {e.msg} at offset {e.pos}", path=source) from e

    try:
        return validate_mapping(mapping)
    except ValueError as e:
        raise ImplementorFileError(str(e), path=source) from e


def dump_implementors_js(mapping: ImplementorMap) -> str:
    """Render ``mapping`` in the generator's script layout."""

    lines = [
        json.dumps(str(crate), ensure_ascii=False)
        + ":"
        + json.dumps(list(descriptors), ensure_ascii=False, separators=(",", ":"))
        for crate, descriptors in mapping.items()
    ]
    return _PRELUDE + "{\n" + ",\n".join(lines) + "\n};" + _HANDOFF


def load_implementors_file(path: str | Path, *, root: str | Path | None = None) -> ImplementorLoader:
    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ImplementorFileError(f"not valid UTF-8: {e}", path=str(p)) from e
    mapping = parse_implementors_js(text, source=str(p))
    return ImplementorLoader(trait_path=trait_path_from_file(p, root=root), mapping=mapping)


def implementors_root(docs_root: str | Path) -> Path:
    root = Path(docs_root)
    if root.name == IMPLEMENTORS_DIR:
        return root
    return root / IMPLEMENTORS_DIR


def iter_implementor_files(docs_root: str | Path) -> Iterator[Path]:
    """Yield generated implementor scripts under a documentation tree, sorted."""

    root = implementors_root(docs_root)
    if not root.is_dir():
        raise FileNotFoundError(f"No {IMPLEMENTORS_DIR}/ directory under {Path(docs_root)}")
    yield from sorted(p for p in root.rglob("*.js") if p.is_file())


def load_docs_tree(docs_root: str | Path, store: "ImplementorStore") -> list[ImplementorLoader]:
    """Run every implementor script of a docs tree against ``store``'s host contexts.

    Traits that are already attached register immediately; the rest wait in
    their pending slot until first viewed.
    """

    root = implementors_root(docs_root)
    loaders: list[ImplementorLoader] = []
    for path in iter_implementor_files(root):
        loader = load_implementors_file(path, root=root)
        loader.publish(store.host(loader.trait_path))
        loaders.append(loader)

    log.info("docs tree loaded", docs_root=str(root), files=len(loaders))
    return loaders
