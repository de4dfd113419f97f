from lsprotocol import types as lsp

from inlay_sync.config import DispatchConfig
from inlay_sync.errors import CONTENT_MODIFIED, REQUEST_CANCELLED
from inlay_sync.hints.render import decoration_styles
from inlay_sync.types import HintCategory, Placement


def test_default_backoff_schedule_is_bounded_exponential() -> None:
    config = DispatchConfig()

    assert list(config.backoff_ms) == [10 * 2**n for n in (2, 4, 6, 8, 10)]
    assert config.max_attempts == 6


def test_transient_and_cancel_codes_match_protocol() -> None:
    assert CONTENT_MODIFIED == lsp.LSPErrorCodes.ContentModified == -32801
    assert REQUEST_CANCELLED == lsp.LSPErrorCodes.RequestCancelled == -32800


def test_type_hints_render_after_and_parameter_hints_before() -> None:
    styles = decoration_styles("inlayHint")

    assert styles[HintCategory.TYPE].placement is Placement.AFTER
    assert styles[HintCategory.PARAMETER].placement is Placement.BEFORE
    assert {style.color for style in styles.values()} == {"inlayHint"}
