"""Export configuration: the asset manifest and the per-call export context.

Nothing here is process-wide. Callers build an ``ExportContext`` (or use
``ExportContext.from_env``) and hand it to every export call.

Environment variables (a ``.env`` file in the working directory is read
first if present):
    DECKEXPORT_ASSETS        path to an asset manifest YAML
    DECKEXPORT_FONT_DIR      directory searched first for .ttf fonts
    DECKEXPORT_HTTP_TIMEOUT  per-request timeout in seconds
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml
from dotenv import load_dotenv

from deckexport.deck.icons import AllyIcon, AllyIconKind, DEFAULT_THEMATIC_EDITION
from deckexport.deck.loader import resolve_ref
from deckexport.deck.models import CATEGORY_ORDER, Category, Edition, Race, parse_category, parse_edition, parse_race
from deckexport.errors import ConfigError
from deckexport.render.assets import DEFAULT_TIMEOUT, AssetLoader, ImageSource
from deckexport.render.fonts import FontSet, load_fonts

logger = logging.getLogger(__name__)

ENV_PREFIX = "DECKEXPORT_"
DEFAULT_MANIFEST = Path(__file__).resolve().parent / "templates" / "assets.yml"


def _parse_table(raw: Any, parse, what: str, base_dir: Optional[Path]) -> dict:
    if not isinstance(raw, dict):
        raise ConfigError(f"'{what}' must be a mapping")
    table = {}
    for key, ref in raw.items():
        member = parse(str(key))
        if member is None:
            raise ConfigError(f"Unknown key {key!r} in '{what}'")
        if not isinstance(ref, str) or not ref:
            raise ConfigError(f"'{what}.{key}' must be an image reference")
        table[member] = resolve_ref(ref, base_dir)
    return table


@dataclass(slots=True)
class AssetManifest:
    """Image references for everything the export draws besides card art.

    Tables are exhaustive: every non-Ally category, race and edition has
    an entry. The Ally chip icon depends on the deck.
    """

    background: str
    category_icons: Mapping[Category, str]
    generic_ally_icon: str
    race_icons: Mapping[Race, str]
    edition_logos: Mapping[Edition, str]
    thematic_edition: Edition = DEFAULT_THEMATIC_EDITION

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], base_dir: Optional[Path] = None) -> "AssetManifest":
        if not isinstance(data, Mapping):
            raise ConfigError("Asset manifest must be a mapping")

        background = data.get("background")
        generic_ally = data.get("generic_ally_icon")
        if not isinstance(background, str) or not background:
            raise ConfigError("Asset manifest must define 'background'")
        if not isinstance(generic_ally, str) or not generic_ally:
            raise ConfigError("Asset manifest must define 'generic_ally_icon'")

        thematic = DEFAULT_THEMATIC_EDITION
        if data.get("thematic_edition"):
            thematic = parse_edition(str(data["thematic_edition"]))
            if thematic is None:
                raise ConfigError(f"Unknown thematic edition {data['thematic_edition']!r}")

        manifest = cls(
            background=resolve_ref(background, base_dir),
            category_icons=_parse_table(data.get("category_icons"), parse_category, "category_icons", base_dir),
            generic_ally_icon=resolve_ref(generic_ally, base_dir),
            race_icons=_parse_table(data.get("race_icons"), parse_race, "race_icons", base_dir),
            edition_logos=_parse_table(data.get("edition_logos"), parse_edition, "edition_logos", base_dir),
            thematic_edition=thematic,
        )
        manifest.validate()
        return manifest

    @classmethod
    def from_yaml(cls, path: str | Path) -> "AssetManifest":
        path = Path(path)
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Failed to read asset manifest {path}: {e}") from e
        return cls.from_dict(data, base_dir=path.resolve().parent)

    def validate(self) -> None:
        """Raise ConfigError when any mapping table is missing an entry."""
        missing = [c.value for c in CATEGORY_ORDER if c is not Category.ALLY and c not in self.category_icons]
        missing += [r.value for r in Race if r not in self.race_icons]
        missing += [e.value for e in Edition if e not in self.edition_logos]
        if missing:
            raise ConfigError(f"Asset manifest has no image for: {', '.join(missing)}")

    def ally_icon(self, choice: AllyIcon) -> str:
        if choice.kind is AllyIconKind.EDITION and choice.edition is not None:
            return self.edition_logos[choice.edition]
        if choice.kind is AllyIconKind.RACE and choice.race is not None:
            return self.race_icons[choice.race]
        return self.generic_ally_icon

    def chip_icons(self, ally: AllyIcon) -> dict[Category, str]:
        """Icon reference for every chip, in category order."""
        icons = {}
        for category in CATEGORY_ORDER:
            if category is Category.ALLY:
                icons[category] = self.ally_icon(ally)
            else:
                icons[category] = self.category_icons[category]
        return icons


def load_manifest(path: str | Path | None = None) -> AssetManifest:
    return AssetManifest.from_yaml(path or DEFAULT_MANIFEST)


@dataclass(slots=True)
class ExportContext:
    """Everything one export call depends on."""

    manifest: AssetManifest
    loader: ImageSource
    fonts: FontSet = field(default_factory=load_fonts)

    @classmethod
    def from_env(cls, manifest_path: str | Path | None = None) -> "ExportContext":
        """Build a context from ``DECKEXPORT_*`` environment variables."""
        env_path = Path.cwd() / ".env"
        if env_path.exists():
            load_dotenv(env_path)

        manifest_path = manifest_path or os.environ.get(f"{ENV_PREFIX}ASSETS")
        font_dir = os.environ.get(f"{ENV_PREFIX}FONT_DIR")
        timeout_raw = os.environ.get(f"{ENV_PREFIX}HTTP_TIMEOUT")
        try:
            timeout = float(timeout_raw) if timeout_raw else DEFAULT_TIMEOUT
        except ValueError as e:
            raise ConfigError(f"{ENV_PREFIX}HTTP_TIMEOUT must be a number, got {timeout_raw!r}") from e

        manifest = load_manifest(manifest_path)
        logger.debug(f"Using asset manifest {manifest_path or DEFAULT_MANIFEST}")
        return cls(
            manifest=manifest,
            loader=AssetLoader(timeout=timeout),
            fonts=load_fonts(Path(font_dir) if font_dir else None),
        )
