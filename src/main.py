"""
1) Load settings from the environment (.env supported).
2) Configure logging.
3) Seed the editor state with the initial family.
4) Connect the Gemini text service (optional; missing key is fine).
5) Open the interactive family tree editor.
"""

import logging

from app import FamilyTreeApp
from settings import load_settings
from state import FamilyTreeState
from text_service import TextService


def main():
    settings = load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    print("Starting Vamsha Vriksha family tree editor...")
    state = FamilyTreeState(language=settings.language)
    print(f"  {len(state.members)} member(s), language {state.language.value}")

    service = TextService.from_settings(settings)
    if not service.available:
        print("  No GEMINI_API_KEY set: translation and story generation will use fallbacks")

    print(f"  Exports go to: {settings.export_dir.resolve()}")
    app = FamilyTreeApp(state, service, settings)
    app.run()
    print("Done!")


if __name__ == "__main__":
    main()
