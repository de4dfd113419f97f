"""Category filtering and atomic per-document decoration replacement."""

from __future__ import annotations

from inlay_sync.config import HintsConfig
from inlay_sync.host import Editor
from inlay_sync.types import (
    AnnotationItem,
    Decoration,
    DecorationStyle,
    HintCategory,
    Placement,
)

_PLACEMENT = {
    HintCategory.TYPE: Placement.AFTER,
    HintCategory.PARAMETER: Placement.BEFORE,
}


def decoration_styles(color: str) -> dict[HintCategory, DecorationStyle]:
    """One host style per category; type hints trail, parameter hints lead."""
    return {
        category: DecorationStyle(name=f"inlay-{category.value}", placement=placement, color=color)
        for category, placement in _PLACEMENT.items()
    }


def to_decoration(item: AnnotationItem) -> Decoration:
    if item.category is HintCategory.TYPE:
        text = f": {item.label}"
    else:
        text = f"{item.label}: "
    return Decoration(range=item.range, content_text=text, placement=_PLACEMENT[item.category])


class CategoryRenderer:
    """Owns the rendered decoration sets of every tracked document.

    Each (document, category) pair is replaced with a single host call, so a
    category never shows a mix of old and new hints.
    """

    def __init__(self, *, color: str = "inlayHint") -> None:
        self.styles = decoration_styles(color)
        self._editors: dict[str, list[Editor]] = {}
        self._rendered: dict[str, dict[HintCategory, list[Decoration]]] = {}

    def apply(
        self,
        editor: Editor,
        results: list[AnnotationItem] | None,
        config: HintsConfig,
    ) -> bool:
        """Render `results` for `editor`; `None` leaves the editor untouched."""

        if results is None:
            return False

        for category in HintCategory:
            if config.shows(category):
                decorations = [to_decoration(item) for item in results if item.category is category]
            else:
                decorations = []
            self._render(editor, category, decorations)
        return True

    def clear_document(self, editor: Editor) -> None:
        for category in HintCategory:
            self._render(editor, category, [])

    def clear_all(self) -> None:
        for editors in list(self._editors.values()):
            for editor in editors:
                self.clear_document(editor)

    def retain(self, document_id: str, editors: list[Editor]) -> None:
        """Keep tracking `document_id` only through the given live editors."""
        tracked = self._editors.get(document_id)
        if tracked is None:
            return
        tracked[:] = [editor for editor in tracked if any(editor is live for live in editors)]

    def forget(self, document_id: str) -> None:
        self._editors.pop(document_id, None)
        self._rendered.pop(document_id, None)

    def rendered(self, document_id: str, category: HintCategory) -> list[Decoration]:
        return list(self._rendered.get(document_id, {}).get(category, []))

    def tracked_documents(self) -> list[str]:
        return list(self._editors)

    def _render(self, editor: Editor, category: HintCategory, decorations: list[Decoration]) -> None:
        document_id = editor.document_id
        editor.set_decorations(self.styles[category], decorations)
        editors = self._editors.setdefault(document_id, [])
        if not any(known is editor for known in editors):
            editors.append(editor)
        self._rendered.setdefault(document_id, {})[category] = decorations
