import json

import pytest
import yaml
from click.testing import CliRunner
from PIL import Image

from deckexport.cli import cli

from conftest import manifest_data


@pytest.fixture()
def workspace(tmp_path, monkeypatch):
    """Deck, catalog and a manifest whose images are all local files."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("DECKEXPORT_ASSETS", raising=False)

    Image.new("RGBA", (192, 108), (10, 20, 30, 255)).save(tmp_path / "bg.png")
    Image.new("RGBA", (20, 20), (255, 255, 0, 255)).save(tmp_path / "icon.png")
    Image.new("RGBA", (50, 75), (200, 0, 0, 255)).save(tmp_path / "card.png")

    data = manifest_data()
    data["background"] = "bg.png"
    data["generic_ally_icon"] = "icon.png"
    for table in ("category_icons", "race_icons", "edition_logos"):
        data[table] = {key: "icon.png" for key in data[table]}
    (tmp_path / "assets.yml").write_text(yaml.safe_dump(data, allow_unicode=True), encoding="utf-8")

    card = str(tmp_path / "card.png")
    catalog = [
        {"id": "A1", "type": "Aliado", "image": card, "cost": 2, "race": "Caballero", "edition": "Helénica"},
        {"id": "A2", "type": "Aliado", "image": card, "cost": 1, "race": "Caballero", "edition": "Helénica"},
        {"id": "W1", "type": "Arma", "image": card, "cost": 3, "edition": "Helénica"},
        {"id": "G0", "type": "Oro", "image": card, "isOroIni": True, "edition": "Helénica"},
    ]
    (tmp_path / "cards.json").write_text(json.dumps(catalog), encoding="utf-8")

    deck = {
        "name": "Knights",
        "cards": [
            {"cardId": "A1", "quantity": 3},
            {"cardId": "A2", "quantity": 2},
            {"cardId": "W1", "quantity": 1},
            {"cardId": "G0", "quantity": 1},
        ],
    }
    (tmp_path / "knights.yml").write_text(yaml.safe_dump(deck), encoding="utf-8")
    return tmp_path


def _args(command, *extra):
    return [command, "--deck", "knights.yml", "--catalog", "cards.json", *extra]


def test_stats(workspace):
    result = CliRunner().invoke(cli, _args("stats"))

    assert result.exit_code == 0, result.output
    assert "Deck: Knights" in result.output
    assert "Total: 7 cards, average cost 1.83" in result.output
    assert "Edition: Helénica" in result.output
    assert "Race: Caballero" in result.output
    assert "Ally icon: race" in result.output
    assert "2x A2\n3x A1\n1x W1\n1x G0" in result.output


def test_layout(workspace):
    result = CliRunner().invoke(cli, _args("layout"))

    assert result.exit_code == 0, result.output
    assert "Allies: 5  Weapons: 1  Talismans: 0  Totems: 0  Golds: 1" in result.output
    assert "Horizontal 1920x1080: scale 1.400" in result.output
    assert "Vertical 1080x1080: 2x2 grid" in result.output
    assert "[WARN]" not in result.output


def test_render_both_formats(workspace):
    result = CliRunner().invoke(
        cli, _args("render", "--format", "both", "--assets", "assets.yml", "--out-dir", "out")
    )

    assert result.exit_code == 0, result.output
    with Image.open(workspace / "out" / "Knights-horizontal.png") as image:
        assert image.size == (1920, 1080)
    with Image.open(workspace / "out" / "Knights-vertical.png") as image:
        assert image.size == (1080, 1080)


def test_render_fails_without_background(workspace):
    (workspace / "bg.png").unlink()

    result = CliRunner().invoke(cli, _args("render", "--assets", "assets.yml"))

    assert result.exit_code == 1
    assert not (workspace / "Knights-horizontal.png").exists()


def test_bad_catalog_is_reported(workspace):
    (workspace / "cards.json").write_text("[{\"id\": \"X\"}]", encoding="utf-8")

    result = CliRunner().invoke(cli, _args("stats"))

    assert result.exit_code == 1
    assert "unknown type" in result.output


def test_catalog_images_relative_to_catalog_file(workspace):
    sets = workspace / "sets"
    sets.mkdir()
    (workspace / "card.png").rename(sets / "card.png")
    catalog = json.loads((workspace / "cards.json").read_text(encoding="utf-8"))
    for record in catalog:
        record["image"] = "card.png"
    (sets / "cards.json").write_text(json.dumps(catalog), encoding="utf-8")

    result = CliRunner().invoke(
        cli,
        ["render", "--deck", "knights.yml", "--catalog", "sets/cards.json", "--assets", "assets.yml"],
    )

    assert result.exit_code == 0, result.output
    with Image.open(workspace / "Knights-horizontal.png") as image:
        # First Ally copy at scale 1.4 starts at (80, 124)
        assert image.convert("RGBA").getpixel((120, 300)) == (200, 0, 0, 255)
