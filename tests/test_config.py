"""Tests for renderer configuration and [tool.flowdiagram] loading."""

from __future__ import annotations

import dataclasses
import logging

import pytest

from flowdiagram.config import DiagramConfig, find_pyproject, load_config


class TestDiagramConfig:
    def test_defaults(self):
        config = DiagramConfig()
        assert (config.width, config.height) == (954, 600)
        assert (config.margin_x, config.margin_y) == (1, 5)
        assert config.node_width == 15
        assert config.node_padding == 100
        assert config.iterations == 100
        assert config.align == "justify"
        assert config.duration_ms == 750
        assert config.node_key == "id"

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            DiagramConfig().width = 10

    def test_layout_extent(self):
        layout = DiagramConfig(width=500, height=300, margin_x=10, margin_y=20).layout_config()
        assert layout.extent == ((10, 20), (490, 280))

    def test_layout_config_carries_settings(self):
        layout = DiagramConfig(node_width=8, node_padding=12, align="left", iterations=6).layout_config()
        assert (layout.node_width, layout.node_padding, layout.align, layout.iterations) == (8, 12, "left", 6)

    def test_replace_ignores_none(self):
        config = DiagramConfig().replace(width=800, height=None, align="center")
        assert config.width == 800
        assert config.height == 600
        assert config.align == "center"

    def test_from_mapping_warns_on_unknown(self, caplog):
        with caplog.at_level(logging.WARNING, logger="flowdiagram.config"):
            config = DiagramConfig.from_mapping({"width": 700, "colour": "red"})
        assert config.width == 700
        assert "colour" in caplog.text


class TestLoadConfig:
    def test_find_pyproject_walks_up(self, tmp_path):
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text("[project]\nname = 'demo'\n")
        child = tmp_path / "src" / "pkg"
        child.mkdir(parents=True)
        assert find_pyproject(child) == pyproject

    def test_reads_section(self, tmp_path):
        (tmp_path / "pyproject.toml").write_text(
            "[tool.flowdiagram]\nwidth = 1200\nnode_padding = 24\nalign = 'right'\nduration_ms = 0\n"
        )
        config = load_config(tmp_path)
        assert config.width == 1200
        assert config.node_padding == 24
        assert config.align == "right"
        assert config.duration_ms == 0
        assert config.height == 600

    def test_missing_section_is_default(self, tmp_path):
        (tmp_path / "pyproject.toml").write_text("[project]\nname = 'demo'\n")
        assert load_config(tmp_path) == DiagramConfig()

    def test_no_pyproject_is_default(self, tmp_path, monkeypatch):
        monkeypatch.setattr("flowdiagram.config.find_pyproject", lambda start=None: None)
        assert load_config(tmp_path) == DiagramConfig()
