"""
Format registry mapping format names to strategy factories.

Registration order is detection priority: ``ImportManager.detect_format``
tries strategies in the order they were registered. Nothing is registered
at import time; the composition root calls ``register_defaults()``.
"""

import logging
from collections import OrderedDict
from pathlib import Path
from types import MethodType
from typing import Callable, List, Union

from opencode_sync.core.errors import UnsupportedFormatError
from opencode_sync.importers.base import BaseImportStrategy
from opencode_sync.importers.chatgpt import ChatGPTImportStrategy
from opencode_sync.importers.claude import ClaudeImportStrategy
from opencode_sync.importers.claude_code_raw import ClaudeCodeRawImportStrategy
from opencode_sync.importers.opencode import OpenCodeImportStrategy

logger = logging.getLogger(__name__)

StrategyFactory = Callable[[Path], BaseImportStrategy]


class ImportFormatRegistry:
    """
    Ordered name -> factory map for import strategies.

    Example
    -------
    >>> registry = ImportFormatRegistry()
    >>> registry.register_defaults()
    >>> registry.get_available_formats()
    ['opencode', 'claude', 'chatgpt', 'claude-code-raw']
    """

    def __init__(self):
        self._factories: "OrderedDict[str, StrategyFactory]" = OrderedDict()

    def register(self, format_name: str, factory: StrategyFactory) -> None:
        """
        Register (or replace) the factory for a format.

        Parameters
        ----------
        format_name : str
            Format identifier
        factory : callable
            Called with the archive path, returns a strategy
        """
        if format_name in self._factories:
            logger.debug("Replacing factory for format %s", format_name)
        self._factories[format_name] = factory

    def create(self, format_name: str, archive_path: Union[str, Path]) -> BaseImportStrategy:
        """
        Instantiate the strategy for a format.

        Raises
        ------
        UnsupportedFormatError
            If no factory is registered under ``format_name``
        """
        factory = self._factories.get(format_name)
        if factory is None:
            raise UnsupportedFormatError(format_name, self.get_available_formats())

        strategy = factory(Path(archive_path))
        if not callable(getattr(strategy, "get_format", None)):
            # Plain objects registered through a lambda still answer get_format()
            strategy.get_format = MethodType(lambda self: format_name, strategy)
        return strategy

    def get_available_formats(self) -> List[str]:
        return list(self._factories)

    def is_supported(self, format_name: str) -> bool:
        return format_name in self._factories

    def register_defaults(self) -> None:
        """Register the built-in formats in detection order."""
        for strategy_cls in (
            OpenCodeImportStrategy,
            ClaudeImportStrategy,
            ChatGPTImportStrategy,
            ClaudeCodeRawImportStrategy,
        ):
            self.register(strategy_cls.format, strategy_cls)
