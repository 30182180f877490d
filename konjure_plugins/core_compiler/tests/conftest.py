# konjure_plugins/core_compiler/tests/conftest.py

from datetime import datetime
from typing import List, Optional, Sequence, Tuple

import pytest

from konjure_plugins.core_compiler.compiler import AssetCompiler
from konjure_plugins.core_compiler.contracts import (
    CompressionResult,
    CompressorInterface,
    Diagnostic,
)


class StubCompressor(CompressorInterface):
    """Records every call; upper-cases the text unless told to fail."""

    def __init__(self, diagnostics: Sequence[Diagnostic] = (), error: Optional[Exception] = None):
        self.diagnostics = list(diagnostics)
        self.error = error
        self.calls: List[Tuple[str, int]] = []

    def compress(self, text: str, max_line_length: int = -1) -> CompressionResult:
        self.calls.append((text, max_line_length))
        if self.error is not None:
            raise self.error
        return CompressionResult(output=text.upper(), diagnostics=self.diagnostics)


@pytest.fixture
def fixed_clock():
    return lambda: datetime(2018, 5, 9, 12, 0, 0)


@pytest.fixture
def js_compressor() -> StubCompressor:
    return StubCompressor()


@pytest.fixture
def css_compressor() -> StubCompressor:
    return StubCompressor()


@pytest.fixture
def compiler(js_compressor, css_compressor, fixed_clock) -> AssetCompiler:
    return AssetCompiler(js_compressor=js_compressor, css_compressor=css_compressor, clock=fixed_clock)


@pytest.fixture
def make_compressor():
    return StubCompressor
