import pytest
from matplotlib.backend_bases import MouseButton, MouseEvent
from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.figure import Figure

from conftest import make_member
from plotting import ZOOM_STEP, TreeCanvas, draw_scene
from view import derive_view

DIMENSIONS = (1200.0, 800.0)


@pytest.fixture
def tree_canvas():
    fig = Figure(figsize=(12, 8), dpi=100)
    FigureCanvasAgg(fig)
    ax = fig.add_axes((0, 0, 1, 1))
    selected = []
    canvas = TreeCanvas(ax, on_select=selected.append)
    canvas.selected = selected
    return canvas


def display_point(canvas, x, y):
    """Display coordinates of a layout point under the canvas' current viewport."""
    sx, sy = canvas.scene.viewport.to_screen(x, y)
    bbox = canvas.ax.bbox
    return bbox.x0 + sx, bbox.y1 - sy


def fire(canvas, name, x, y, **kwargs):
    event = MouseEvent(name, canvas.figure.canvas, x, y, **kwargs)
    canvas.figure.canvas.callbacks.process(name, event)


def test_draw_scene_adds_one_patch_per_shape(abc_members):
    fig = Figure(figsize=(12, 8), dpi=100)
    FigureCanvasAgg(fig)
    ax = fig.add_axes((0, 0, 1, 1))
    scene = derive_view(abc_members, "A", DIMENSIONS)

    draw_scene(ax, scene)

    texts = sum(1 for c in scene.cards for t in c.texts if t.text)
    assert len(ax.patches) == len(scene.links) + 2 * len(scene.cards) + texts
    assert {p.get_gid() for p in ax.patches if p.get_gid()} == {"A", "B", "C"}
    left, right, top, bottom = scene.viewport.limits(*DIMENSIONS)
    assert ax.get_xlim() == pytest.approx((left, right))
    assert ax.get_ylim() == pytest.approx((bottom, top))
    fig.canvas.draw()


def test_diagnostic_is_drawn_instead_of_tree():
    fig = Figure(figsize=(12, 8), dpi=100)
    FigureCanvasAgg(fig)
    ax = fig.add_axes((0, 0, 1, 1))
    scene = derive_view([make_member("A"), make_member("B")], None, DIMENSIONS)

    draw_scene(ax, scene)

    assert len(ax.patches) == 0
    assert [t.get_text() for t in ax.texts] == [scene.diagnostic]


def test_click_on_card_selects_without_panning(tree_canvas, abc_members):
    tree_canvas.render(derive_view(abc_members, None, tree_canvas.dimensions()))
    viewport = tree_canvas.scene.viewport
    x, y = display_point(tree_canvas, 120.0, 160.0)

    fire(tree_canvas, "button_press_event", x, y, button=MouseButton.LEFT)
    fire(tree_canvas, "motion_notify_event", x + 50, y + 50)

    assert tree_canvas.selected == ["C"]
    assert tree_canvas.scene.viewport == viewport


def test_drag_on_background_pans(tree_canvas, abc_members):
    tree_canvas.render(derive_view(abc_members, None, tree_canvas.dimensions()))
    viewport = tree_canvas.scene.viewport
    positions = [(c.member_id, c.x, c.y) for c in tree_canvas.scene.cards]

    fire(tree_canvas, "button_press_event", 50, 50, button=MouseButton.LEFT)
    fire(tree_canvas, "motion_notify_event", 80, 30)
    fire(tree_canvas, "button_release_event", 80, 30, button=MouseButton.LEFT)

    assert tree_canvas.selected == []
    assert tree_canvas.scene.viewport.tx == viewport.tx + 30
    assert tree_canvas.scene.viewport.ty == viewport.ty + 20
    assert tree_canvas.scene.viewport.k == viewport.k
    assert [(c.member_id, c.x, c.y) for c in tree_canvas.scene.cards] == positions


def test_scroll_zooms_within_bounds(tree_canvas, abc_members):
    tree_canvas.render(derive_view(abc_members, None, tree_canvas.dimensions()))
    k = tree_canvas.scene.viewport.k

    fire(tree_canvas, "scroll_event", 600, 400, step=1)
    assert tree_canvas.scene.viewport.k == pytest.approx(k * ZOOM_STEP)

    for _ in range(50):
        fire(tree_canvas, "scroll_event", 600, 400, step=-1)
    assert tree_canvas.scene.viewport.k == pytest.approx(0.1)


def test_reset_view_restores_initial_transform(tree_canvas, abc_members):
    tree_canvas.render(derive_view(abc_members, None, tree_canvas.dimensions()))
    fire(tree_canvas, "scroll_event", 600, 400, step=3)

    tree_canvas.reset_view()

    assert tree_canvas.scene.viewport.k == 0.85
    assert tree_canvas.scene.viewport.tx == 600.0
