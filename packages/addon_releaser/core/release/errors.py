"""Errors raised by the release pipeline.

Every error aborts the run; the CLI reports the message and exits non-zero.
"""

from __future__ import annotations

import traceback


class ReleaseError(Exception):
    """Base exception for all release pipeline errors."""


class DuplicateUUIDError(ReleaseError):
    """Raised when two packs in one run share a manifest header UUID."""

    def __init__(
        self,
        uuid: str,
        pack_path: str,
        pack_index: int,
        other_pack_path: str,
        other_pack_index: int,
    ) -> None:
        self.uuid = uuid
        self.pack_path = pack_path
        self.pack_index = pack_index
        self.other_pack_path = other_pack_path
        self.other_pack_index = other_pack_index
        super().__init__(
            f'Pack "{pack_path}" (packs[{pack_index}]) has the same UUID as '
            f'"{other_pack_path}" (packs[{other_pack_index}]), which is not allowed.'
        )


class ManifestParseError(ReleaseError):
    """Raised when a pack's source manifest cannot be parsed."""

    def __init__(self, pack_path: str, reason: str) -> None:
        self.pack_path = pack_path
        self.reason = reason
        super().__init__(f'Failed to parse "manifest.json" in pack "{pack_path}": {reason}')


class GeneratedManifestError(ReleaseError):
    """Raised when the rewritten manifest no longer parses.

    Distinguishes a bug introduced by version rewriting or find/replace
    directives from an authoring bug in the source manifest.
    """

    def __init__(self, pack_path: str, cause: BaseException) -> None:
        self.pack_path = pack_path
        self.cause = cause
        trace = "".join(traceback.format_exception(cause)).rstrip()
        super().__init__(
            f'Failed to parse generated manifest "manifest.json" in pack "{pack_path}": '
            f"{cause}\n{trace}"
        )


class DirectiveError(ReleaseError):
    """Base for errors tied to one modification directive of one pack."""

    def __init__(
        self, pack_index: int, directive_index: int, pack_path: str, target: str, detail: str
    ) -> None:
        self.pack_index = pack_index
        self.directive_index = directive_index
        self.pack_path = pack_path
        self.target = target
        super().__init__(
            f'packs[{pack_index}].modifications[{directive_index}]: "{target}" {detail} '
            f'in the pack "{pack_path}".'
        )


class NotFoundError(DirectiveError):
    """Raised when a directive's target does not exist in the archive tree."""

    def __init__(self, pack_index: int, directive_index: int, pack_path: str, target: str) -> None:
        super().__init__(pack_index, directive_index, pack_path, target, "could not be found")


class WrongKindError(DirectiveError):
    """Raised when a directive's target is a file where a folder is expected, or vice versa."""

    def __init__(
        self,
        pack_index: int,
        directive_index: int,
        pack_path: str,
        target: str,
        expected: str,
    ) -> None:
        self.expected = expected
        super().__init__(pack_index, directive_index, pack_path, target, f"is not a {expected}")


class VersionSourceNotFoundError(ReleaseError):
    """Raised when the configured version-source UUID matches no processed pack."""

    def __init__(self, uuid: str) -> None:
        self.uuid = uuid
        super().__init__(f"The pack with UUID {uuid} could not be found.")


class InvalidVersionTypeError(ReleaseError):
    """Raised when the version callback returns something other than a string."""

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f"Version must be a string, got {type(value).__name__}: {value!r}")


class DuplicatePackDirectoryError(ReleaseError):
    """Raised when two packs of one ``.mcaddon`` map to the same top-level folder."""

    def __init__(
        self,
        directory: str,
        pack_path: str,
        pack_index: int,
        other_pack_path: str,
        other_pack_index: int,
    ) -> None:
        self.directory = directory
        self.pack_path = pack_path
        self.pack_index = pack_index
        self.other_pack_path = other_pack_path
        self.other_pack_index = other_pack_index
        super().__init__(
            f'Pack "{pack_path}" (packs[{pack_index}]) would be written to the folder '
            f'"{directory}" already used by "{other_pack_path}" (packs[{other_pack_index}]); '
            f"give one of them a different release_name."
        )
