"""
Tests for ImportFormatRegistry.
"""
from types import SimpleNamespace

import pytest

from opencode_sync.core.errors import ImportFormatError, UnsupportedFormatError
from opencode_sync.importers import (
    ChatGPTImportStrategy,
    ClaudeCodeRawImportStrategy,
    ImportFormatRegistry,
)


@pytest.fixture
def registry():
    registry = ImportFormatRegistry()
    registry.register_defaults()
    return registry


def test_new_registry_is_empty():
    assert ImportFormatRegistry().get_available_formats() == []


def test_defaults_in_detection_order(registry):
    assert registry.get_available_formats() == ["opencode", "claude", "chatgpt", "claude-code-raw"]


def test_create(registry, tmp_path):
    strategy = registry.create("chatgpt", tmp_path)

    assert isinstance(strategy, ChatGPTImportStrategy)
    assert strategy.get_format() == "chatgpt"
    assert strategy.archive_path == tmp_path


def test_create_raw_log_strategy_shares_archive(registry, tmp_path):
    strategy = registry.create("claude-code-raw", str(tmp_path))

    assert isinstance(strategy, ClaudeCodeRawImportStrategy)
    assert strategy.manifests.archive_path == tmp_path


def test_create_unknown_format(registry, tmp_path):
    with pytest.raises(UnsupportedFormatError) as exc_info:
        registry.create("gemini", tmp_path)

    assert isinstance(exc_info.value, ImportFormatError)
    assert str(exc_info.value) == (
        "Unsupported format: gemini. Available formats: opencode, claude, chatgpt, claude-code-raw"
    )


def test_is_supported(registry):
    assert registry.is_supported("claude")
    assert not registry.is_supported("auto")


def test_get_format_bound_when_missing(tmp_path):
    registry = ImportFormatRegistry()
    registry.register("custom", lambda path: SimpleNamespace(archive_path=path))

    strategy = registry.create("custom", tmp_path)

    assert strategy.get_format() == "custom"


def test_register_replaces_factory(registry, tmp_path):
    registry.register("claude", ChatGPTImportStrategy)

    assert isinstance(registry.create("claude", tmp_path), ChatGPTImportStrategy)
    assert registry.get_available_formats().index("claude") == 1
