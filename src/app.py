"""Matplotlib editor window: tree canvas, edit panel and key bindings."""

import asyncio
import logging
import textwrap
import threading
from concurrent.futures import Future

import matplotlib
import matplotlib.pyplot as plt
from matplotlib.widgets import TextBox

from export import export_jpeg, export_pdf
from models import LANGUAGE_CODES, RELATION_TYPES, Gender, Language
from plotting import TreeCanvas
from settings import Settings
from state import FamilyTreeState, fetch_translation
from text_service import TextService
from view import derive_view

logger = logging.getLogger(__name__)

FIELDS = [
    ("Full name", "name"),
    ("Regional name", "regional_name"),
    ("Spouse", "spouse_name"),
    ("Spouse (regional)", "spouse_regional_name"),
    ("Birth date", "birth_date"),
    ("Death date", "death_date"),
]

KEY_HELP = (
    "a: add child   delete: remove   g: gender   r: relation   l: language   "
    "t: translate   s: story   j: JPG   p: PDF   0: reset view"
)


def _next(options, current):
    options = list(options)
    try:
        return options[(options.index(current) + 1) % len(options)]
    except ValueError:
        return options[0]


class FamilyTreeApp:
    def __init__(self, state: FamilyTreeState, service: TextService, settings: Settings):
        self.state = state
        self.service = service
        self.settings = settings
        # one loop for every service call, so the API client keeps a single connection pool
        self._loop = asyncio.new_event_loop()
        self._loop_thread = threading.Thread(target=self._loop.run_forever, name="vamsha-service", daemon=True)
        self._loop_thread.start()
        self._pending: list[tuple[Future, object]] = []
        self._syncing = False
        self._status = ""

        matplotlib.rcParams["toolbar"] = "None"
        self.figure = plt.figure(
            "Vamsha Vriksha", figsize=(settings.width / 100, settings.height / 100), dpi=100
        )
        tree_ax = self.figure.add_axes((0.0, 0.06, 0.72, 0.94))
        self.canvas = TreeCanvas(tree_ax, on_select=self.state.select, on_resize=self._on_resize)

        self.textboxes: dict[str, TextBox] = {}
        for i, (label, attr) in enumerate(FIELDS):
            ax = self.figure.add_axes((0.82, 0.9 - i * 0.07, 0.16, 0.05))
            box = TextBox(ax, label, initial="")
            box.on_submit(lambda text, attr=attr: self._on_field_submit(attr, text))
            self.textboxes[attr] = box

        self.info_ax = self.figure.add_axes((0.74, 0.06, 0.25, 0.42))
        self.info_ax.set_axis_off()
        self.status_ax = self.figure.add_axes((0.0, 0.0, 1.0, 0.06))
        self.status_ax.set_axis_off()

        manager = self.figure.canvas.manager
        if manager is not None and getattr(manager, "key_press_handler_id", None) is not None:
            # default keymap would toggle grid/log scale on g and l
            self.figure.canvas.mpl_disconnect(manager.key_press_handler_id)
        self.figure.canvas.mpl_connect("key_press_event", self._on_key)
        self._timer = self.figure.canvas.new_timer(interval=100)
        self._timer.add_callback(self._poll)
        self._timer.start()

        self.state.subscribe(lambda _: self.refresh())
        self.refresh()

    def refresh(self):
        """Rebuild the scene from state and redraw everything."""
        scene = derive_view(
            self.state.members,
            self.state.selected_id,
            self.canvas.dimensions(),
            font_family=self.settings.font_family,
        )
        self.canvas.render(scene)
        self._sync_panel()

    def _on_resize(self, dimensions):
        self.refresh()

    def _sync_panel(self):
        member = self.state.selected_member
        self._syncing = True
        try:
            for attr, box in self.textboxes.items():
                value = getattr(member, attr) if member is not None else ""
                box.set_val(value or "")
        finally:
            self._syncing = False

        self.info_ax.clear()
        self.info_ax.set_axis_off()
        language = self.state.language
        lines = [f"Language: {language.value} ({LANGUAGE_CODES[language]})"]
        if member is not None:
            lines.append(f"Relation: {member.relation_type}")
            lines.append(f"Gender: {Gender(member.gender).value}")
        else:
            lines.append("No member selected.")
        if self.state.story:
            lines.append("")
            lines.extend(textwrap.wrap(self.state.story, 40))
        self.info_ax.text(0, 1, "\n".join(lines), va="top", fontsize=9, family=list(self.settings.font_family))
        self._show_status(self._status)

    def _show_status(self, message: str):
        self._status = message
        self.status_ax.clear()
        self.status_ax.set_axis_off()
        self.status_ax.text(0.01, 0.6, KEY_HELP, fontsize=8, color="#6b7280")
        self.status_ax.text(0.01, 0.15, message, fontsize=9, color="#dc2626")
        self.figure.canvas.draw_idle()

    def _on_field_submit(self, attr: str, text: str):
        if self._syncing or self.state.selected_id is None:
            return
        value = text if attr == "name" else (text or None)
        self.state.edit_member(self.state.selected_id, **{attr: value})

    def _typing(self) -> bool:
        return any(box.capturekeystrokes for box in self.textboxes.values())

    def _on_key(self, event):
        if self._typing():
            return

        member = self.state.selected_member
        key = event.key
        if key == "a" and member is not None:
            self.state.add_child(member.id)
        elif key == "delete" and member is not None:
            if member.parent_id is None:
                self._show_status("The root member cannot be deleted.")
            else:
                self.state.delete_member(member.id)
        elif key == "g" and member is not None:
            self.state.edit_member(member.id, gender=_next(Gender, Gender(member.gender)))
        elif key == "r" and member is not None:
            self.state.edit_member(member.id, relation_type=_next(RELATION_TYPES, member.relation_type))
        elif key == "l":
            self.state.set_language(_next(Language, self.state.language))
        elif key == "t" and member is not None:
            self.translate_selected()
        elif key == "s":
            self.generate_story()
        elif key == "j":
            self._report_export(export_jpeg(self.canvas.scene, self.settings.export_dir))
        elif key == "p":
            self._report_export(export_pdf(self.canvas.scene, self.settings.export_dir))
        elif key == "0":
            self.canvas.reset_view()

    def _report_export(self, path):
        self._show_status(f"Saved {path}" if path else "Nothing to export.")

    def _submit(self, coro, on_done):
        """Run ``coro`` on the service loop; ``on_done`` is applied on the GUI thread."""
        self._pending.append((asyncio.run_coroutine_threadsafe(coro, self._loop), on_done))

    def _poll(self):
        done = [(f, cb) for f, cb in self._pending if f.done()]
        for item in done:
            self._pending.remove(item)
            future, on_done = item
            try:
                result = future.result()
            except Exception:
                logger.exception("Background request failed")
                self._show_status("AI service unavailable.")
                continue
            on_done(result)

    def translate_selected(self):
        request = self.state.begin_translation(self.state.selected_id)
        if request is None:
            return
        self._show_status("Translating...")

        def apply(result):
            applied = self.state.apply_translation(result)
            self._show_status("" if applied else "Translation discarded: member changed meanwhile.")

        self._submit(fetch_translation(request, self.service), apply)

    def generate_story(self):
        self._show_status("Weaving your history...")

        def apply(story):
            self._status = ""
            self.state.set_story(story)

        self._submit(
            self.service.generate_family_history(list(self.state.members), self.state.language), apply
        )

    def close(self):
        """Stop the timer, detach the canvas handlers and shut the service loop down."""
        self._timer.stop()
        self.canvas.disconnect()
        if self._loop.is_closed():
            return
        for future, _ in self._pending:
            future.cancel()
        self._pending = []
        self._loop.call_soon_threadsafe(self._loop.stop)
        self._loop_thread.join()
        self._loop.close()

    def run(self):
        try:
            plt.show()
        finally:
            self.close()
