"""Error types shared across the family tree editor."""


class FamilyTreeError(Exception):
    """Base error for the editor."""


class StructuralError(FamilyTreeError):
    """Raised when the member collection does not form a single rooted tree."""

    def __init__(self, problems: list[str]):
        self.problems = list(problems)
        super().__init__("; ".join(self.problems) or "Invalid tree structure")


class ExternalServiceError(FamilyTreeError):
    """Raised inside the text service when a request cannot produce text."""


class ExportPreconditionError(FamilyTreeError):
    """Raised when there is no renderable scene to export."""
