"""Tests for the terminal front-end."""

import asyncio
from pathlib import Path

import pytest
from salvo import cli
from salvo.config import GameSettings
from salvo.engine.board import CellState, create_empty_board
from salvo.engine.session import Message, MessageKind
from salvo.engine.ship import Orientation, Ship
from salvo.preferences import load_preferences


def test_format_board_hides_enemy_ships() -> None:
    board = (
        create_empty_board()
        .with_cell(0, 0, CellState.SHIP)
        .with_cell(0, 1, CellState.HIT)
        .with_cell(9, 9, CellState.MISS)
    )
    hidden = cli.format_board(board, show_ships=False).splitlines()
    shown = cli.format_board(board, show_ships=True).splitlines()

    assert hidden[0].split() == list("ABCDEFGHIJ")
    assert hidden[1].split()[2:4] == [".", "X"]
    assert shown[1].split()[2:4] == ["S", "X"]
    assert hidden[10].split()[-1] == "o"
    assert len(hidden) == 11


def test_format_message_prefixes_kind() -> None:
    assert cli.format_message(Message("You missed.", MessageKind.INFO)) == "[-] You missed."
    assert cli.format_message(Message("Invalid coordinates.", MessageKind.ERROR)).startswith("[!]")


def test_format_tally() -> None:
    fleet = (
        Ship("Destroyer", 2, 0, 0, Orientation.HORIZONTAL, hits=2),
        Ship("Destroyer", 2, 5, 5, Orientation.HORIZONTAL),
    )
    assert cli.format_tally(fleet) == "1/2 sunk"


def _scripted(monkeypatch: pytest.MonkeyPatch, answers: list[str]) -> list[str]:
    prompts: list[str] = []

    async def fake_ask(prompt: str) -> str:
        prompts.append(prompt)
        return answers.pop(0)

    monkeypatch.setattr(cli, "_ask", fake_ask)
    return prompts


def test_play_game_shows_instructions_once_and_quits(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    settings = GameSettings(computer_attack_delay=0, reset_delay=0, preferences_path=tmp_path / "p.json")

    _scripted(monkeypatch, ["q"])
    asyncio.run(cli.play_game(settings, seed=1))
    first = capsys.readouterr().out
    assert "How to play" in first
    assert load_preferences(settings.preferences_path).instructions_seen is True

    _scripted(monkeypatch, ["q"])
    asyncio.run(cli.play_game(settings, seed=1))
    assert "How to play" not in capsys.readouterr().out


def test_play_game_reports_each_turn(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    settings = GameSettings(computer_attack_delay=0, reset_delay=0, preferences_path=tmp_path / "p.json")
    _scripted(monkeypatch, ["Z9", "A1", "A1", "q"])

    asyncio.run(cli.play_game(settings, seed=3))

    out = capsys.readouterr().out
    assert "[!] Invalid coordinates." in out
    assert "You already attacked this cell." in out
    assert "Computer" in out
    assert out.rstrip().endswith("Goodbye!")
