"""Manifest rewriting: version normalisation, provenance stamping and find/replace.

The rewritten text is produced once per pack and reused for every copy of
``manifest.json`` written into the archive tree.
"""

from __future__ import annotations

import copy
import json
import logging
from dataclasses import dataclass
from typing import Any

import json5
from pydantic import BaseModel, ConfigDict

from addon_releaser.core.config.models import (
    FindAndReplaceInFileModification,
    PackConfig,
    ReleaserConfig,
)
from addon_releaser.core.release.constants import (
    FORMAT_VERSION,
    MANIFEST_FILE_NAME,
    PROVENANCE_KEY,
)
from addon_releaser.core.release.errors import (
    DuplicateUUIDError,
    GeneratedManifestError,
    ManifestParseError,
)
from addon_releaser.core.release.globs import matches_glob
from addon_releaser.core.release.replace import apply_all
from addon_releaser.core.release.versioning import normalize_manifest_versions, render_dotted

logger = logging.getLogger(__name__)

MANIFEST_INDENT = 4


class RewrittenManifest(BaseModel):
    """Final manifest of one pack.

    Attributes:
        text: Serialized manifest written into the release files
        manifest: Parsed form of ``text``
        uuid: Header UUID of the final manifest
        version: Header version of the final manifest (tuple or string)
    """

    model_config = ConfigDict(frozen=True)

    text: str
    manifest: dict[str, Any]
    uuid: str
    version: list[int] | str


def parse_manifest(raw: bytes | str, pack_path: str) -> dict[str, Any]:
    """Parse manifest bytes and check the header fields the releaser relies on.

    Comments and trailing commas are accepted, as Bedrock itself does.

    Raises:
        ManifestParseError: If the manifest is not a JSON object with a header UUID
    """
    try:
        text = raw.decode("utf-8-sig") if isinstance(raw, bytes) else raw
        data = json5.loads(text)
    except ValueError as e:
        raise ManifestParseError(pack_path, str(e)) from e

    if not isinstance(data, dict):
        raise ManifestParseError(pack_path, f"expected a JSON object, got {type(data).__name__}")
    header = data.get("header")
    if not isinstance(header, dict) or not isinstance(header.get("uuid"), str):
        raise ManifestParseError(pack_path, "missing header.uuid")
    return data


def stamp_provenance(manifest: dict[str, Any]) -> None:
    """Record this releaser's format version under ``metadata.generated_with``.

    Idempotent: a version already present is not appended again.
    """
    metadata = manifest.get("metadata")
    if not isinstance(metadata, dict):
        metadata = manifest["metadata"] = {}
    generated_with = metadata.get("generated_with")
    if not isinstance(generated_with, dict):
        generated_with = metadata["generated_with"] = {}
    versions = generated_with.get(PROVENANCE_KEY)
    if not isinstance(versions, list):
        generated_with[PROVENANCE_KEY] = [FORMAT_VERSION]
    elif FORMAT_VERSION not in versions:
        versions.append(FORMAT_VERSION)


def serialize_manifest(manifest: dict[str, Any]) -> str:
    """Serialize a manifest with the releaser's fixed formatting."""
    return json.dumps(manifest, indent=MANIFEST_INDENT, ensure_ascii=False)


def manifest_replacements(pack: PackConfig) -> list[FindAndReplaceInFileModification]:
    """Find/replace directives of ``pack`` that target the root manifest."""
    return [
        m
        for m in pack.modifications
        if isinstance(m, FindAndReplaceInFileModification)
        and matches_glob(MANIFEST_FILE_NAME, m.target)
    ]


class ManifestRewriter:
    """Produces the final manifest text for each pack of a run.

    Example:
        >>> rewriter = ManifestRewriter(config)
        >>> result = rewriter.rewrite(raw_bytes, pack)
        >>> result.version
        [1, 2, 3]
    """

    def __init__(self, config: ReleaserConfig) -> None:
        self.config = config

    def rewrite(self, raw: bytes | str, pack: PackConfig) -> RewrittenManifest:
        """Rewrite a pack's source manifest.

        Raises:
            ManifestParseError: If the source manifest is malformed
            GeneratedManifestError: If the rewritten text no longer parses
        """
        manifest = copy.deepcopy(parse_manifest(raw, pack.path))

        normalize_manifest_versions(
            manifest,
            self.config.release_version_format,
            strip_build=self.config.strip_build_version,
            strip_preview=self.config.strip_preview_version,
        )
        stamp_provenance(manifest)

        text = serialize_manifest(manifest)
        replacements = manifest_replacements(pack)
        if replacements:
            version = render_dotted(manifest["header"].get("version", ""))
            text = apply_all(text, replacements, version)

        try:
            final = json5.loads(text)
            if not isinstance(final, dict) or not isinstance(final.get("header"), dict):
                raise ValueError("generated manifest has no header object")
            uuid = final["header"]["uuid"]
            if not isinstance(uuid, str):
                raise ValueError("generated manifest has no header.uuid")
        except (ValueError, KeyError) as e:
            raise GeneratedManifestError(pack.path, e) from e

        logger.debug("Rewrote manifest of %s (uuid=%s)", pack.path, uuid)
        return RewrittenManifest(
            text=text,
            manifest=final,
            uuid=uuid,
            version=final["header"].get("version", ""),
        )


@dataclass
class RegisteredPack:
    """A pack recorded against its manifest UUID."""

    index: int
    pack: PackConfig
    manifest: RewrittenManifest | None = None


class ManifestRegistry:
    """Run-wide record of pack UUIDs, used for collision detection and naming."""

    def __init__(self) -> None:
        self._source: dict[str, RegisteredPack] = {}
        self._generated: dict[str, RegisteredPack] = {}

    def claim(self, uuid: str, pack: PackConfig, index: int) -> None:
        """Claim a source manifest UUID for ``pack``.

        Raises:
            DuplicateUUIDError: If another pack of this run already claimed it
        """
        existing = self._source.get(uuid)
        if existing is not None:
            raise DuplicateUUIDError(uuid, pack.path, index, existing.pack.path, existing.index)
        self._source[uuid] = RegisteredPack(index=index, pack=pack)

    def record(self, pack: PackConfig, index: int, manifest: RewrittenManifest) -> None:
        """Record the final manifest of ``pack``.

        Raises:
            DuplicateUUIDError: If find/replace made two final manifests share a UUID
        """
        existing = self._generated.get(manifest.uuid)
        if existing is not None and existing.index != index:
            raise DuplicateUUIDError(
                manifest.uuid, pack.path, index, existing.pack.path, existing.index
            )
        self._generated[manifest.uuid] = RegisteredPack(index=index, pack=pack, manifest=manifest)

    def get(self, uuid: str) -> RegisteredPack | None:
        """Final manifest entry recorded for ``uuid``."""
        return self._generated.get(uuid)

    def by_index(self, index: int) -> RegisteredPack | None:
        """Final manifest entry recorded for the pack at ``index``."""
        for entry in self._generated.values():
            if entry.index == index:
                return entry
        return None

    def __len__(self) -> int:
        return len(self._generated)
