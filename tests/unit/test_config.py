"""Tests for OptionsBuilder / RenderOptions and logging setup."""

from __future__ import annotations

import dataclasses
import logging

import pytest

from yuml2svg.config import OptionsBuilder, RenderOptions
from yuml2svg.errors import InvalidDiagramType, MissingTypeDirective, Yuml2SvgError
from yuml2svg.log import LEVEL_ENV, configure_logging
from yuml2svg.types import DiagramType, Direction


def test_defaults() -> None:
    options = OptionsBuilder.from_options(None).freeze()
    assert options == RenderOptions()
    assert options.direction == Direction.TB
    assert options.diagram_type == DiagramType.Class
    assert options.is_dark is False


def test_public_option_names() -> None:
    builder = OptionsBuilder.from_options(
        {"dir": "LR", "type": "usecase", "isDark": True, "dotHeaderOverrides": {"node": {"shape": "box"}}}
    )
    options = builder.freeze()
    assert options.direction == Direction.LR
    assert options.diagram_type == DiagramType.UseCase
    assert options.is_dark is True
    assert options.header_overrides == {"node": {"shape": "box"}}


def test_snake_case_option_names() -> None:
    options = OptionsBuilder.from_options({"direction": Direction.RL, "diagram_type": DiagramType.State}).freeze()
    assert options.direction == Direction.RL
    assert options.diagram_type == DiagramType.State


def test_lowercase_direction_is_accepted() -> None:
    assert OptionsBuilder.from_options({"dir": "rl"}).direction == Direction.RL


def test_unknown_direction_keeps_default(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING):
        builder = OptionsBuilder.from_options({"dir": "diagonal"})
    assert builder.direction == Direction.TB
    assert "diagonal" in caplog.text


def test_unknown_option_is_ignored() -> None:
    assert OptionsBuilder.from_options({"colour": "red"}) == OptionsBuilder()


def test_from_render_options_round_trips() -> None:
    original = RenderOptions(direction=Direction.LR, diagram_type=DiagramType.Package, is_dark=True)
    assert OptionsBuilder.from_options(original).freeze() == original


def test_unknown_caller_type_fails_at_freeze() -> None:
    builder = OptionsBuilder.from_options({"type": "flowchart"})
    assert builder.diagram_type == "flowchart"
    with pytest.raises(InvalidDiagramType, match="Invalid diagram type"):
        builder.freeze()


def test_missing_type_fails_at_freeze() -> None:
    with pytest.raises(MissingTypeDirective):
        OptionsBuilder(diagram_type=None).freeze()


def test_errors_are_value_errors() -> None:
    assert issubclass(InvalidDiagramType, Yuml2SvgError)
    assert issubclass(MissingTypeDirective, ValueError)


def test_render_options_are_frozen() -> None:
    options = RenderOptions()
    with pytest.raises(dataclasses.FrozenInstanceError):
        options.is_dark = True  # type: ignore[misc]


def test_non_string_caller_type_fails_at_freeze() -> None:
    builder = OptionsBuilder.from_options({"type": 5})
    with pytest.raises(InvalidDiagramType, match="Invalid diagram type: 5"):
        builder.freeze()


def test_empty_caller_type_keeps_default() -> None:
    assert OptionsBuilder.from_options({"type": ""}).freeze().diagram_type == DiagramType.Class


# ─── Logging setup ───────────────────────────────────────────────────────────


@pytest.fixture
def root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def test_verbose_logging_is_debug(root_logger: logging.Logger, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(LEVEL_ENV, "error")
    assert configure_logging(verbose=True) == logging.DEBUG
    assert root_logger.level == logging.DEBUG


def test_logging_level_from_environment(root_logger: logging.Logger, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(LEVEL_ENV, " warning ")
    assert configure_logging() == logging.WARNING
    assert root_logger.level == logging.WARNING


@pytest.mark.parametrize("value", ["", "nonsense"])
def test_logging_level_falls_back_to_info(
    value: str, root_logger: logging.Logger, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv(LEVEL_ENV, value)
    assert configure_logging() == logging.INFO


def test_logging_level_default(root_logger: logging.Logger, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(LEVEL_ENV, raising=False)
    assert configure_logging() == logging.INFO
