"""Drawing and pointer interaction for family tree scenes on matplotlib axes."""

from collections.abc import Callable

from matplotlib.axes import Axes
from matplotlib.backend_bases import MouseButton
from matplotlib.patches import Circle, FancyBboxPatch, PathPatch
from matplotlib.path import Path
from matplotlib.textpath import TextPath
from matplotlib.transforms import Affine2D

from layout import CARD_HEIGHT, CARD_WIDTH
from scene import (
    AVATAR_RADIUS,
    CORNER_RADIUS,
    DIAGNOSTIC_COLOR,
    LINK_COLOR,
    LINK_WIDTH,
    Scene,
    TextItem,
    Viewport,
    font_properties,
    measure_text,
)

ZOOM_STEP = 1.2
HINT_TEXT = "Use scroll to zoom, drag to pan."

_CURVE = [Path.MOVETO, Path.CURVE4, Path.CURVE4, Path.CURVE4]


def _points(ax: Axes, scene: Scene, width: float) -> float:
    """Convert a stroke width in layout units to points at the current zoom."""
    return width * scene.viewport.k * 72.0 / ax.figure.dpi


def _text_patch(item: TextItem, family) -> PathPatch:
    prop = font_properties(item.size, item.weight, family)
    path = TextPath((0, 0), item.text, prop=prop)
    offset = measure_text(item.text, item.size, item.weight, family) / 2
    # Layout y grows downwards, so glyphs are mirrored back upright.
    transform = Affine2D().scale(1, -1).translate(item.x - offset, item.y)
    return PathPatch(transform.transform_path(path), facecolor=item.color, edgecolor="none", lw=0)


def apply_viewport(ax: Axes, scene: Scene):
    """Show the part of the layout selected by the scene's viewport."""
    left, right, top, bottom = scene.viewport.limits(*scene.dimensions)
    ax.set_xlim(left, right)
    # bottom > top: the y axis points down like a canvas
    ax.set_ylim(bottom, top)


def draw_scene(ax: Axes, scene: Scene):
    """
    Clear ``ax`` and draw the whole scene on it.

    Links are drawn first, then one card per node: rounded rectangle, avatar
    circle, gender glyph and the text lines. Texts are drawn as paths in layout
    units so they follow the zoom like every other shape.
    """
    ax.clear()
    ax.set_axis_off()
    apply_viewport(ax, scene)

    if scene.diagnostic:
        ax.text(
            0.5,
            0.5,
            scene.diagnostic,
            transform=ax.transAxes,
            ha="center",
            va="center",
            color=DIAGNOSTIC_COLOR,
            fontsize=12,
        )

    for link in scene.links:
        ax.add_patch(
            PathPatch(
                Path(link.control_points(), _CURVE),
                fill=False,
                edgecolor=LINK_COLOR,
                lw=_points(ax, scene, LINK_WIDTH),
                zorder=1,
            )
        )

    for card in scene.cards:
        ax.add_patch(
            FancyBboxPatch(
                (card.x - CARD_WIDTH / 2, card.y - CARD_HEIGHT / 2),
                CARD_WIDTH,
                CARD_HEIGHT,
                boxstyle=f"round,pad=0,rounding_size={CORNER_RADIUS}",
                facecolor=card.fill,
                edgecolor=card.edgecolor,
                lw=_points(ax, scene, card.linewidth),
                gid=card.member_id,
                zorder=2,
            )
        )
        ax.add_patch(
            Circle(
                card.avatar_center,
                AVATAR_RADIUS,
                facecolor=card.avatar_fill,
                edgecolor=card.avatar_edgecolor,
                lw=_points(ax, scene, 2.0),
                zorder=3,
            )
        )
        for item in card.texts:
            if item.text:
                patch = _text_patch(item, scene.font_family)
                patch.set_zorder(4)
                ax.add_patch(patch)


class TreeCanvas:
    """
    Interactive view of a scene: drag to pan, scroll to zoom, click to select.

    Pan and zoom only change the scene's viewport; card positions stay as laid
    out. A press that lands on a card selects it and never starts a pan.
    """

    def __init__(
        self,
        ax: Axes,
        on_select: Callable[[str], None] | None = None,
        on_resize: Callable[[tuple[float, float]], None] | None = None,
    ):
        self.ax = ax
        self.figure = ax.figure
        self.scene: Scene | None = None
        self.on_select = on_select
        self.on_resize = on_resize
        self._drag_start = None

        canvas = self.figure.canvas
        self._cids = [
            canvas.mpl_connect("button_press_event", self._on_press),
            canvas.mpl_connect("motion_notify_event", self._on_motion),
            canvas.mpl_connect("button_release_event", self._on_release),
            canvas.mpl_connect("scroll_event", self._on_scroll),
            canvas.mpl_connect("resize_event", self._on_resize),
        ]

    def dimensions(self) -> tuple[float, float]:
        """Size of the drawing area in pixels."""
        return self.ax.bbox.width, self.ax.bbox.height

    def disconnect(self):
        for cid in self._cids:
            self.figure.canvas.mpl_disconnect(cid)
        self._cids = []

    def render(self, scene: Scene):
        """Full clear-and-redraw."""
        self.scene = scene
        self._drag_start = None
        draw_scene(self.ax, scene)
        if scene.is_renderable:
            self.ax.text(0.01, 0.01, HINT_TEXT, transform=self.ax.transAxes, fontsize=8, color="#6b7280")
        self.figure.canvas.draw_idle()

    def set_viewport(self, viewport: Viewport, redraw: bool = False):
        if self.scene is None:
            return
        self.scene.viewport = viewport
        if redraw:
            self.render(self.scene)
        else:
            apply_viewport(self.ax, self.scene)
            self.figure.canvas.draw_idle()

    def reset_view(self):
        self.set_viewport(Viewport.initial(*self.dimensions()), redraw=True)

    def _canvas_point(self, event) -> tuple[float, float]:
        """Event position relative to the axes' top-left corner."""
        bbox = self.ax.bbox
        return event.x - bbox.x0, bbox.y1 - event.y

    def _on_press(self, event):
        if self.scene is None or event.inaxes is not self.ax or event.button != MouseButton.LEFT:
            return

        x, y = self.scene.viewport.to_layout(*self._canvas_point(event))
        member_id = self.scene.hit_test(x, y)
        if member_id is not None:
            self._drag_start = None
            if self.on_select is not None:
                self.on_select(member_id)
            return

        self._drag_start = (event.x, event.y, self.scene.viewport)

    def _on_motion(self, event):
        if self._drag_start is None or event.x is None:
            return
        x0, y0, viewport = self._drag_start
        # display y grows upwards, canvas y downwards
        self.set_viewport(viewport.panned(event.x - x0, y0 - event.y))

    def _on_release(self, event):
        self._drag_start = None

    def _on_scroll(self, event):
        if self.scene is None or event.inaxes is not self.ax:
            return
        factor = ZOOM_STEP ** event.step
        viewport = self.scene.viewport.zoomed(factor, *self._canvas_point(event))
        self.set_viewport(viewport, redraw=True)

    def _on_resize(self, event):
        if self.on_resize is not None:
            self.on_resize(self.dimensions())
