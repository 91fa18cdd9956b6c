"""Scene description: what gets drawn for a laid-out tree, independent of matplotlib axes."""

from dataclasses import dataclass, field, replace

from matplotlib.font_manager import FontProperties
from matplotlib.textpath import TextToPath

from layout import CARD_HEIGHT, CARD_WIDTH, Layout
from models import Gender, Member

FONT_FAMILY = ("DejaVu Sans",)

MIN_ZOOM = 0.1
MAX_ZOOM = 2.0
INITIAL_ZOOM = 0.85
INITIAL_TOP_OFFSET = 80.0

AVATAR_RADIUS = 24.0
CORNER_RADIUS = 12.0
NAME_MAX_WIDTH = 200.0
ELLIPSIS = "..."

LINK_COLOR = "#d1d5db"
LINK_WIDTH = 2.0
DIAGNOSTIC_COLOR = "#ef4444"
INVALID_TREE_MESSAGE = "Invalid Tree Structure. Ensure only one root exists."

# glyph, avatar fill
GENDER_STYLE = {
    Gender.MALE: ("♂", "#f3f4f6"),
    Gender.FEMALE: ("♀", "#fee2e2"),
    Gender.OTHER: ("⚥", "#fef3c7"),
}

DEFAULT_CARD_STYLE = dict(fill="#ffffff", edgecolor="#e5e7eb", linewidth=1.0, avatar_edgecolor="#ffffff")
SELECTED_CARD_STYLE = dict(fill="#fef2f2", edgecolor="#dc2626", linewidth=3.0, avatar_edgecolor="#dc2626")

_text_to_path = TextToPath()


@dataclass(frozen=True)
class Viewport:
    """
    Pan/zoom transform from layout units to canvas pixels.

    A layout point (x, y) lands on the canvas at (tx + k * x, ty + k * y),
    with the canvas origin at the top-left corner.
    """

    tx: float = 0.0
    ty: float = 0.0
    k: float = 1.0

    @classmethod
    def initial(cls, width: float, height: float) -> "Viewport":
        """Center the root horizontally, slightly below the top, slightly zoomed out."""
        return cls(tx=width / 2, ty=INITIAL_TOP_OFFSET, k=INITIAL_ZOOM)

    def to_screen(self, x: float, y: float) -> tuple[float, float]:
        return self.tx + self.k * x, self.ty + self.k * y

    def to_layout(self, sx: float, sy: float) -> tuple[float, float]:
        return (sx - self.tx) / self.k, (sy - self.ty) / self.k

    def panned(self, dx: float, dy: float) -> "Viewport":
        return replace(self, tx=self.tx + dx, ty=self.ty + dy)

    def zoomed(self, factor: float, sx: float, sy: float) -> "Viewport":
        """Scale by ``factor`` around canvas point (sx, sy), clamped to the zoom range."""
        k = min(MAX_ZOOM, max(MIN_ZOOM, self.k * factor))
        x, y = self.to_layout(sx, sy)
        return Viewport(tx=sx - k * x, ty=sy - k * y, k=k)

    def limits(self, width: float, height: float) -> tuple[float, float, float, float]:
        """Visible layout rectangle (left, right, top, bottom) for a canvas of the given size."""
        left, top = self.to_layout(0.0, 0.0)
        right, bottom = self.to_layout(width, height)
        return left, right, top, bottom


@dataclass(frozen=True)
class TextItem:
    text: str
    x: float
    y: float  # baseline
    size: float
    color: str
    weight: str = "normal"


@dataclass
class NodeCard:
    member_id: str
    x: float
    y: float
    fill: str
    edgecolor: str
    linewidth: float
    avatar_fill: str
    avatar_edgecolor: str
    selected: bool = False
    texts: list[TextItem] = field(default_factory=list)

    @property
    def avatar_center(self) -> tuple[float, float]:
        return self.x, self.y - CARD_HEIGHT / 2

    def bounds(self) -> tuple[float, float, float, float]:
        """(left, top, right, bottom) including the avatar that overhangs the top edge."""
        return (
            self.x - CARD_WIDTH / 2,
            self.y - CARD_HEIGHT / 2 - AVATAR_RADIUS,
            self.x + CARD_WIDTH / 2,
            self.y + CARD_HEIGHT / 2,
        )

    def contains(self, x: float, y: float) -> bool:
        if abs(x - self.x) <= CARD_WIDTH / 2 and abs(y - self.y) <= CARD_HEIGHT / 2:
            return True
        ax, ay = self.avatar_center
        return (x - ax) ** 2 + (y - ay) ** 2 <= AVATAR_RADIUS**2


@dataclass(frozen=True)
class Link:
    source_id: str
    target_id: str
    start: tuple[float, float]
    end: tuple[float, float]

    def control_points(self) -> list[tuple[float, float]]:
        """Cubic Bezier points for a vertical link: start, two controls at mid-height, end."""
        (x0, y0), (x1, y1) = self.start, self.end
        mid = (y0 + y1) / 2
        return [(x0, y0), (x0, mid), (x1, mid), (x1, y1)]


@dataclass
class Scene:
    dimensions: tuple[float, float]
    viewport: Viewport
    cards: list[NodeCard] = field(default_factory=list)
    links: list[Link] = field(default_factory=list)
    diagnostic: str | None = None
    font_family: tuple[str, ...] = FONT_FAMILY

    @property
    def is_renderable(self) -> bool:
        return bool(self.cards)

    def hit_test(self, x: float, y: float) -> str | None:
        """Member id of the topmost card under layout point (x, y), if any."""
        for card in reversed(self.cards):
            if card.contains(x, y):
                return card.member_id
        return None

    def content_bounds(self) -> tuple[float, float, float, float] | None:
        """(left, top, right, bottom) of everything drawn, or None for an empty scene."""
        if not self.cards:
            return None
        boxes = [card.bounds() for card in self.cards]
        return (
            min(b[0] for b in boxes),
            min(b[1] for b in boxes),
            max(b[2] for b in boxes),
            max(b[3] for b in boxes),
        )


def font_properties(size: float, weight: str = "normal", family=FONT_FAMILY) -> FontProperties:
    return FontProperties(family=list(family), size=size, weight=weight)


def measure_text(text: str, size: float, weight: str = "normal", family=FONT_FAMILY) -> float:
    """Rendered width of ``text`` in layout units at the given font size."""
    if not text:
        return 0.0
    width, _, _ = _text_to_path.get_text_width_height_descent(
        text, font_properties(size, weight, family), ismath=False
    )
    return width


def truncate_text(
    text: str, max_width: float, size: float, weight: str = "normal", family=FONT_FAMILY
) -> str:
    """
    Shorten ``text`` until it fits ``max_width``, appending an ellipsis.

    Widths are measured from the font outlines, so wide scripts and narrow
    Latin text are treated alike.
    """
    if measure_text(text, size, weight, family) <= max_width:
        return text

    trimmed = text
    while trimmed:
        trimmed = trimmed[:-1]
        candidate = trimmed + ELLIPSIS
        if measure_text(candidate, size, weight, family) <= max_width:
            return candidate
    return ELLIPSIS


def _card_texts(member: Member, x: float, y: float, family) -> list[TextItem]:
    glyph, _ = GENDER_STYLE[Gender(member.gender)]
    texts = [
        TextItem(glyph, x, y - 48, 14, "#374151"),
        TextItem(truncate_text(member.name, NAME_MAX_WIDTH, 16, "bold", family), x, y - 10, 16, "#111827", "bold"),
        TextItem(member.regional_name or "", x, y + 12, 15, "#dc2626", "medium"),
    ]
    if member.spouse_name:
        texts.append(TextItem(f"♥ {member.spouse_name}", x, y + 32, 13, "#4b5563"))
        if member.spouse_regional_name:
            texts.append(TextItem(member.spouse_regional_name, x, y + 48, 13, "#ef4444"))
    return texts


def build_scene(
    layout: Layout,
    selected_id: str | None,
    dimensions: tuple[float, float],
    viewport: Viewport | None = None,
    font_family=FONT_FAMILY,
) -> Scene:
    """
    Describe the cards and links for a laid-out tree.

    The card whose member id equals ``selected_id`` is highlighted; an id that
    is not in the tree highlights nothing.
    """
    width, height = dimensions
    scene = Scene(
        dimensions=dimensions,
        viewport=viewport or Viewport.initial(width, height),
        font_family=tuple(font_family),
    )

    for parent, child in layout.links():
        scene.links.append(
            Link(parent.id, child.id, layout.positions[parent.id], layout.positions[child.id])
        )

    for node in layout.nodes():
        x, y = layout.positions[node.id]
        selected = node.id == selected_id
        style = SELECTED_CARD_STYLE if selected else DEFAULT_CARD_STYLE
        _, avatar_fill = GENDER_STYLE[Gender(node.member.gender)]
        scene.cards.append(
            NodeCard(
                member_id=node.id,
                x=x,
                y=y,
                avatar_fill=avatar_fill,
                selected=selected,
                texts=_card_texts(node.member, x, y, font_family),
                **style,
            )
        )

    return scene


def empty_scene(
    dimensions: tuple[float, float], diagnostic: str | None = None, font_family=FONT_FAMILY
) -> Scene:
    width, height = dimensions
    return Scene(
        dimensions=dimensions,
        viewport=Viewport.initial(width, height),
        diagnostic=diagnostic,
        font_family=tuple(font_family),
    )
