"""Deck image rendering.

Exports are lazily loaded to avoid import cycles with
``deckexport.config``, which depends on the asset and font modules.
"""

__all__ = [
    # assets.py
    "AssetLoader",
    "AssetScope",
    # header.py
    "CropPolicy",
    "draw_header",
    # rows.py
    "plan_rows",
    "resolve_scale",
    # grid.py
    "plan_grid",
    "grid_shape",
    # export.py
    "ExportFormat",
    "export_deck_image",
    "render_deck_image",
    "suggested_filename",
]


def __getattr__(name: str):
    """Lazy import for module exports."""
    if name in ("AssetLoader", "AssetScope"):
        from deckexport.render import assets
        return getattr(assets, name)
    elif name in ("CropPolicy", "draw_header"):
        from deckexport.render import header
        return getattr(header, name)
    elif name in ("plan_rows", "resolve_scale"):
        from deckexport.render import rows
        return getattr(rows, name)
    elif name in ("plan_grid", "grid_shape"):
        from deckexport.render import grid
        return getattr(grid, name)
    elif name in ("ExportFormat", "export_deck_image", "render_deck_image", "suggested_filename"):
        from deckexport.render import export
        return getattr(export, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
