"""Identity of the releaser as stamped into released packs."""

from __future__ import annotations

from typing import Final

DIST_NAME: Final = "addon-releaser"
TOOL_NAME: Final = "Add-On Releaser"

# Version of the release format written into manifests and provenance files.
FORMAT_VERSION: Final = "0.1.0"

# Key under manifest metadata.generated_with
PROVENANCE_KEY: Final = "Add-On_Releaser"

MANIFEST_FILE_NAME: Final = "manifest.json"
PROVENANCE_FILE_NAME: Final = f"Release file generated with {TOOL_NAME}.txt"

ATTRIBUTION_LINKS: Final = (
    "https://www.youtube.com/@8Crafter",
    "https://www.8crafter.com",
    "https://discord.gg/8crafter-studios",
)

MCADDON_EXTENSION: Final = ".mcaddon"
MCPACK_EXTENSION: Final = ".mcpack"

DIRECTORY_COMMENT: Final = f"Directory added by {TOOL_NAME} v{FORMAT_VERSION}."
FILE_COMMENT: Final = f"File added by {TOOL_NAME} v{FORMAT_VERSION}."


def provenance_text(container_extension: str) -> str:
    """Body of the provenance file added at the root of every released pack."""
    lines = [
        f"This release of the pack was compiled into a {container_extension} file "
        f"by {TOOL_NAME} v{FORMAT_VERSION}.",
        *ATTRIBUTION_LINKS,
    ]
    return "\n".join(lines)
