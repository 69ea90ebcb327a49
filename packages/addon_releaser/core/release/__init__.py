"""Release pipeline: manifests, ingestion, directives and archive assembly."""

from addon_releaser.core.release.assembler import ReleaseAssembler, ReleaseResult, WrittenArchive
from addon_releaser.core.release.errors import (
    DirectiveError,
    DuplicatePackDirectoryError,
    DuplicateUUIDError,
    GeneratedManifestError,
    InvalidVersionTypeError,
    ManifestParseError,
    NotFoundError,
    ReleaseError,
    VersionSourceNotFoundError,
    WrongKindError,
)
from addon_releaser.core.release.ingest import TreeIngester
from addon_releaser.core.release.manifest import (
    ManifestRegistry,
    ManifestRewriter,
    RewrittenManifest,
)
from addon_releaser.core.release.modifications import ModificationEngine
from addon_releaser.core.release.versioning import VersionCallback

__all__ = [
    # Orchestration
    "ReleaseAssembler",
    "ReleaseResult",
    "WrittenArchive",
    # Stages
    "ManifestRewriter",
    "ManifestRegistry",
    "RewrittenManifest",
    "TreeIngester",
    "ModificationEngine",
    "VersionCallback",
    # Errors
    "ReleaseError",
    "DirectiveError",
    "DuplicatePackDirectoryError",
    "DuplicateUUIDError",
    "GeneratedManifestError",
    "InvalidVersionTypeError",
    "ManifestParseError",
    "NotFoundError",
    "VersionSourceNotFoundError",
    "WrongKindError",
]
