"""
Import service: wires the format registry into an ImportManager and
persists what an import produced.

Imported conversations are written in the sync-directory layout
(``<archive>/conversations/<id>.json``) so that an archive root can be used
directly as a sync directory.
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

from pydantic import BaseModel, Field

from opencode_sync.core.config import CONVERSATIONS_DIRNAME
from opencode_sync.core.errors import ImportFormatError, UnsupportedFormatError
from opencode_sync.core.models import ImportOptions, ImportResult
from opencode_sync.core.utils import ensure_dir, safe_file_stem, write_json_file
from opencode_sync.importers.manager import ImportManager
from opencode_sync.importers.registry import ImportFormatRegistry

logger = logging.getLogger(__name__)

AUTO_FORMAT = "auto"
ARCHIVE_REASON = "conversion_failed"


class FormatCheck(BaseModel):
    format: str
    can_import: bool


class ScanReport(BaseModel):
    """Which formats recognize a path, in detection order."""

    source_path: str
    checks: List[FormatCheck] = Field(default_factory=list)
    detected_format: Optional[str] = None


class ImportService:
    """
    Composition root for imports.

    Attributes
    ----------
    archive_path : Path
        Archive root receiving conversations and archived records
    registry : ImportFormatRegistry
        Format registry; built-in formats are registered when none is given
    manager : ImportManager
        Manager holding one strategy instance per registered format
    """

    def __init__(
        self,
        archive_path: Union[str, Path],
        registry: Optional[ImportFormatRegistry] = None,
    ):
        self.archive_path = Path(archive_path)
        self.registry = registry or self.default_registry()

        self.manager = ImportManager(self.archive_path)
        for format_name in self.registry.get_available_formats():
            self.manager.register_strategy(self.registry.create(format_name, self.archive_path))

    @staticmethod
    def default_registry() -> ImportFormatRegistry:
        registry = ImportFormatRegistry()
        registry.register_defaults()
        return registry

    def get_available_formats(self) -> List[str]:
        return self.registry.get_available_formats()

    def resolve_format(self, source_path: Union[str, Path], format_name: str) -> str:
        """
        Turn a requested format (or ``auto``) into a registered format name.

        Raises
        ------
        UnsupportedFormatError
            If the format is not registered
        ImportFormatError
            If ``auto`` was requested and no format recognizes the path
        """
        if format_name == AUTO_FORMAT:
            detected = self.manager.detect_format(source_path)
            if detected is None:
                raise ImportFormatError(
                    f"Could not detect import format for {source_path}. "
                    f"Available formats: {', '.join(self.get_available_formats())}"
                )
            logger.info("Auto-detected format %s for %s", detected, source_path)
            return detected

        if not self.registry.is_supported(format_name):
            raise UnsupportedFormatError(format_name, self.get_available_formats())
        return format_name

    def import_from(
        self,
        source_path: Union[str, Path],
        format_name: str = AUTO_FORMAT,
        options: Optional[ImportOptions] = None,
    ) -> ImportResult:
        """
        Import a source path and persist the outcome.

        Parameters
        ----------
        source_path : str or Path
            Directory to import from
        format_name : str
            Registered format name, or ``auto`` to detect it
        options : ImportOptions, optional
            ``preview`` skips every write

        Returns
        -------
        ImportResult
            The strategy's result
        """
        options = options or ImportOptions()
        format_name = self.resolve_format(source_path, format_name)
        result = self.manager.import_from(source_path, format_name, options)

        if options.preview:
            logger.info("Preview mode: nothing written for %s", source_path)
            return result

        if result.imported:
            conversations_dir = ensure_dir(self.archive_path / CONVERSATIONS_DIRNAME)
            for conversation in result.imported:
                write_json_file(
                    conversations_dir / f"{safe_file_stem(conversation.id)}.json",
                    conversation.to_json_dict(),
                )
            logger.info("Wrote %d conversation(s) to %s", len(result.imported), conversations_dir)

        strategy = self.manager.get_strategy(format_name)
        if result.archived and not getattr(strategy, "writes_archive", False):
            for raw in result.archived:
                self.manager.archive_conversation(raw, ARCHIVE_REASON)

        return result

    def scan(self, source_path: Union[str, Path]) -> ScanReport:
        """Report which registered formats recognize a path."""
        checks = []
        for format_name in self.manager.get_supported_formats():
            strategy = self.manager.get_strategy(format_name)
            checks.append(FormatCheck(format=format_name, can_import=strategy.can_import(source_path)))

        detected = next((c.format for c in checks if c.can_import), None)
        return ScanReport(source_path=str(source_path), checks=checks, detected_format=detected)
