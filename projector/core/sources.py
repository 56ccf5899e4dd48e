"""Content sources: the host block registry and one-shot palette probing.

Each optional content source (a mod, in host terms) is described by a
PaletteSpec. At startup each PaletteSpec is resolved once against the host's
BlockRegistry into a Palette; missing blocks are replaced by their fallback
so generators always have a token to place and never probe again.
"""

from __future__ import annotations
from collections.abc import Iterable
from pydantic import BaseModel

from projector.models import ContentToken, token
from projector.utils.logger import get_logger

log = get_logger(__name__)


class BlockRegistry:
    """Read-only view of the block ids known to the host."""

    def __init__(self, block_ids: Iterable[str] = ()) -> None:
        self._blocks: dict[str, ContentToken] = {}
        self._namespaces: set[str] = set()
        for block_id in block_ids:
            self.add(block_id)

    def add(self, block_id: str) -> None:
        self._blocks[block_id] = token(block_id)
        self._namespaces.add(block_id.split(":", 1)[0])

    def lookup(self, block_id: str) -> ContentToken | None:
        return self._blocks.get(block_id)

    def has_namespace(self, namespace: str) -> bool:
        return namespace in self._namespaces

    def __contains__(self, block_id: object) -> bool:
        return block_id in self._blocks

    def __len__(self) -> int:
        return len(self._blocks)


class PaletteSpec(BaseModel):
    """Block ids a content source is expected to provide, with fallbacks."""
    source: str                                  # e.g. "mekanism"
    namespace: str                               # block id namespace probed
    blocks: dict[str, str] = {}                  # key -> block id
    fallbacks: dict[str, str] = {}               # key -> block id used when missing
    groups: dict[str, list[str]] = {}            # group -> ordered keys
    group_fallbacks: dict[str, list[str]] = {}   # group -> block ids used when empty


class Palette:
    """Resolved tokens for one content source."""

    def __init__(
        self,
        source: str,
        tokens: dict[str, ContentToken],
        groups: dict[str, list[ContentToken]],
        available: bool,
        missing: list[str] | None = None,
    ) -> None:
        self.source = source
        self.available = available
        self.missing = list(missing or [])
        self._tokens = dict(tokens)
        self._groups = {name: list(members) for name, members in groups.items()}

    @classmethod
    def resolve(cls, spec: PaletteSpec, registry: BlockRegistry) -> Palette:
        available = registry.has_namespace(spec.namespace)
        tokens: dict[str, ContentToken] = {}
        missing: list[str] = []

        for key, block_id in spec.blocks.items():
            found = registry.lookup(block_id) if available else None
            if found is None:
                missing.append(key)
                fallback_id = spec.fallbacks.get(key, "minecraft:stone")
                found = registry.lookup(fallback_id) or token(fallback_id)
            tokens[key] = found

        groups: dict[str, list[ContentToken]] = {}
        for name, keys in spec.groups.items():
            members = [
                tokens[k] for k in keys
                if k in tokens and k not in missing
            ]
            if not members:
                members = [
                    registry.lookup(b) or token(b)
                    for b in spec.group_fallbacks.get(name, [])
                ]
            groups[name] = members

        log.info(
            "source_probe",
            source=spec.source,
            available=available,
            resolved=len(tokens) - len(missing),
            missing=len(missing),
        )
        return cls(spec.source, tokens, groups, available, missing)

    def __getitem__(self, key: str) -> ContentToken:
        return self._tokens[key]

    def get(self, key: str, default: ContentToken | None = None) -> ContentToken | None:
        return self._tokens.get(key, default)

    def group(self, name: str) -> list[ContentToken]:
        """Return a copy of a token group (possibly empty)."""
        return list(self._groups.get(name, []))

    def is_native(self, key: str) -> bool:
        """True when the key resolved to the source's own block."""
        return key in self._tokens and key not in self.missing

    def merged(self, other: Palette) -> Palette:
        """Combine two palettes; `other` wins on key clashes and names the result."""
        groups = dict(self._groups)
        groups.update(other._groups)
        return Palette(
            source=other.source,
            tokens={**self._tokens, **other._tokens},
            groups=groups,
            available=other.available,
            missing=self.missing + other.missing,
        )

    def __contains__(self, key: object) -> bool:
        return key in self._tokens
