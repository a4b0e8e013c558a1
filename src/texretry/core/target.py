"""Resolution of the document name and the artifact that ends the loop."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from texretry.core.exceptions import InvalidDocumentError


SOURCE_SUFFIX = ".tex"
ARTIFACT_SUFFIX = ".pdf"


@dataclass(frozen=True, slots=True)
class TargetSpec:
    """Document passed to the driver and the file whose existence signals success."""

    document: str
    root: str
    artifact: Path

    @classmethod
    def from_filename(
        cls,
        name: str | None,
        *,
        suffix: str = SOURCE_SUFFIX,
        artifact_suffix: str = ARTIFACT_SUFFIX,
    ) -> TargetSpec:
        """Build the target from the final CLI argument."""
        if not name:
            raise InvalidDocumentError(
                f"The document name should be the last argument and end in '{suffix}'."
            )
        if not name.endswith(suffix):
            raise InvalidDocumentError(
                f"'{name}' is not a {suffix} file; "
                f"the document name should be the last argument and end in '{suffix}'."
            )
        root = name[: -len(suffix)]
        if not root:
            raise InvalidDocumentError(f"'{name}' has no base name before '{suffix}'.")
        return cls(document=name, root=root, artifact=Path(root + artifact_suffix))

    def artifact_exists(self) -> bool:
        """Return True once the target artifact is present on disk."""
        return self.artifact.exists()


__all__ = ["ARTIFACT_SUFFIX", "SOURCE_SUFFIX", "TargetSpec"]
