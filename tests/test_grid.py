import pytest
from PIL import Image

from deckexport.deck.models import CardStack, Category
from deckexport.render.assets import AssetScope
from deckexport.render.grid import GAP, draw_grid, grid_shape, plan_grid

from conftest import CARD_COLOR, FakeSource, make_card

LAYOUT_TOP = 120
SIZE = 1080


def _stacks(*quantities):
    return [CardStack(make_card(f"card-{i}", Category.ALLY), q) for i, q in enumerate(quantities)]


@pytest.mark.parametrize(
    "count, shape",
    [(0, (0, 0)), (1, (1, 1)), (2, (2, 1)), (5, (3, 2)), (10, (4, 3)), (16, (4, 4)), (17, (5, 4))],
)
def test_grid_shape(count, shape):
    assert grid_shape(count) == shape


def test_grid_shape_is_near_square():
    for n in range(1, 201):
        cols, rows = grid_shape(n)
        assert cols * rows >= n
        assert (rows - 1) * cols < n
        assert 0 <= cols - rows <= 1


def test_sixteen_cards_fit_height():
    layout = plan_grid(_stacks(*[1] * 16), LAYOUT_TOP, SIZE, SIZE)

    assert (layout.cols, layout.rows) == (4, 4)
    # (920 - 3 * 8) / 4 = 224px tall; width follows the card aspect
    assert layout.cell_height == pytest.approx(224)
    assert layout.cell_width == pytest.approx(224 / 1.5)
    assert layout.start_y == LAYOUT_TOP


@pytest.mark.parametrize("count", [1, 3, 7, 16, 40, 120])
def test_cells_keep_aspect_and_stay_inside(count):
    layout = plan_grid(_stacks(*[1] * count), LAYOUT_TOP, SIZE, SIZE)

    assert layout.cell_height == pytest.approx(layout.cell_width * 1.5)
    assert layout.total_width <= SIZE - 80 + 1e-6
    bottom = layout.start_y + layout.rows * layout.cell_height + (layout.rows - 1) * GAP
    assert bottom <= SIZE - 40 + 1e-6
    # Centred horizontally
    assert layout.start_x == pytest.approx((SIZE - layout.total_width) / 2)


def test_cells_fill_row_major():
    layout = plan_grid(_stacks(1, 1, 1, 1, 1), LAYOUT_TOP, SIZE, SIZE)

    assert [(c.col, c.row) for c in layout.cells] == [(0, 0), (1, 0), (2, 0), (0, 1), (1, 1)]
    assert layout.cells[1].x == pytest.approx(layout.start_x + layout.cell_width + GAP)
    assert layout.cells[3].y == pytest.approx(LAYOUT_TOP + layout.cell_height + GAP)


def test_empty_grid():
    layout = plan_grid([], LAYOUT_TOP, SIZE, SIZE)
    assert (layout.cols, layout.rows) == (0, 0)
    assert layout.cells == []


def test_missing_image_leaves_cell_blank(fonts):
    layout = plan_grid(_stacks(3, 2, 1), LAYOUT_TOP, SIZE, SIZE)
    canvas = Image.new("RGBA", (SIZE, SIZE), (0, 0, 0, 255))
    source = FakeSource(missing={"img:card-1"})

    drawn = draw_grid(canvas, layout, AssetScope(source), fonts.badge)

    assert drawn == 2
    blank = layout.cells[1]
    center_x = int(blank.x + layout.cell_width / 2)
    # No card and no badge
    assert canvas.getpixel((center_x, int(blank.y) + 15)) == (0, 0, 0, 255)
    assert canvas.getpixel((center_x, int(blank.y + layout.cell_height / 2))) == (0, 0, 0, 255)


def test_badge_only_for_multiple_copies(fonts):
    layout = plan_grid(_stacks(3, 1), LAYOUT_TOP, SIZE, SIZE)
    canvas = Image.new("RGBA", (SIZE, SIZE), (0, 0, 0, 255))

    draw_grid(canvas, layout, AssetScope(FakeSource()), fonts.badge)

    with_badge, without = layout.cells
    badge_point = (int(with_badge.x + layout.cell_width / 2) - 10, int(with_badge.y) + 15)
    red, green, blue, alpha = canvas.getpixel(badge_point)
    assert 100 < red < 200
    assert (green, blue, alpha) == (0, 0, 255)

    plain_point = (int(without.x + layout.cell_width / 2) - 10, int(without.y) + 15)
    assert canvas.getpixel(plain_point) == CARD_COLOR
