# tests/unit/test_main.py — v2
"""Tests for main.py — CLI argument parsing and command dispatch."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from lexassist.core.models import ResearchResult
from lexassist.main import _build_parser, main
from lexassist.version import __version__


class TestParser:
    def test_ask(self):
        args = _build_parser().parse_args(["ask", "How long do I have to sue?"])
        assert args.command == "ask"
        assert args.message == "How long do I have to sue?"

    def test_research_defaults(self):
        args = _build_parser().parse_args(["research", "adverse possession"])
        assert args.jurisdiction == "canada"
        assert args.practice_area == "all"

    def test_research_options(self):
        args = _build_parser().parse_args(
            ["research", "custody", "--jurisdiction", "ontario", "--practice-area", "family"],
        )
        assert args.jurisdiction == "ontario"
        assert args.practice_area == "family"

    def test_analyze_contract(self):
        args = _build_parser().parse_args(["analyze-contract", "lease.pdf", "-t", "lease"])
        assert args.file == Path("lease.pdf")
        assert args.contract_type == "lease"
        assert args.jurisdiction == "Canada"

    def test_verbose(self):
        assert _build_parser().parse_args(["-v", "status"]).verbose is True

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc:
            _build_parser().parse_args(["--version"])
        assert exc.value.code == 0
        assert __version__ in capsys.readouterr().out


class TestMain:
    def test_no_command(self, capsys):
        assert main([]) == 1
        assert "usage" in capsys.readouterr().out

    def test_missing_contract_file(self, tmp_path):
        assert main(["analyze-contract", str(tmp_path / "missing.pdf")]) == 1

    def test_research_prints_json(self, capsys):
        service = MagicMock()
        service.__aenter__ = AsyncMock(return_value=service)
        service.__aexit__ = AsyncMock(return_value=None)
        service.enhanced_legal_research = AsyncMock(
            return_value=ResearchResult(summary="Two years."),
        )
        with patch("lexassist.api.facade.LegalAIService", return_value=service):
            assert main(["research", "limitation period", "--jurisdiction", "ontario"]) == 0

        service.enhanced_legal_research.assert_awaited_once_with("limitation period", "ontario", "all")
        assert '"summary": "Two years."' in capsys.readouterr().out

    def test_fatal_error_returns_one(self):
        with patch("lexassist.api.facade.LegalAIService", side_effect=RuntimeError("no keys")):
            assert main(["ask", "hi"]) == 1
