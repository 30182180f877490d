# konjure_plugins/core_compiler/contracts.py

from __future__ import annotations
from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

# --- 1. 枚举 ---

class CompileExtension(Enum):
    """A logical asset kind and the file suffix it is compiled from."""
    JS = ".js"
    CSS = ".css"

    @property
    def suffix(self) -> str:
        return self.value

    @property
    def output_name(self) -> str:
        return f"konjure-min{self.suffix}"

    def __str__(self) -> str:
        return self.name


class CompilationScope(Enum):
    JS = "js"
    CSS = "css"
    ALL = "all"

    @classmethod
    def resolve(cls, name: Optional[str]) -> "CompilationScope":
        """Looks a scope up by case-insensitive name; no name means ALL."""
        if name is None:
            return cls.ALL
        try:
            return cls[name.strip().upper()]
        except KeyError:
            raise ConfigurationError(f"No such compilation scope {name}") from None

    def affects(self, extension: CompileExtension) -> bool:
        if self is CompilationScope.ALL:
            return True
        return self.name == extension.name


# --- 2. 异常 ---

class CompilerError(Exception):
    """Base class for every asset compiler failure."""

class ConfigurationError(CompilerError):
    """The run cannot start: bad source directory, unknown scope, unusable destination."""

class CombineError(CompilerError):
    """A source file matching the extension could not be read."""

class CompressorError(CompilerError):
    """The minifier failed on the combined buffer."""


# --- 3. 数据模型 ---

class Diagnostic(BaseModel):
    level: Literal["warning", "error"] = "warning"
    message: str
    line: Optional[int] = None
    column: Optional[int] = None

    def format(self) -> str:
        if self.line is None or self.line < 0:
            return self.message
        return f"{self.line}:{self.column if self.column is not None else 0}: {self.message}"


class CompressionResult(BaseModel):
    output: str
    diagnostics: List[Diagnostic] = Field(default_factory=list)


class CompileOptions(BaseModel):
    """
    One compiler invocation. Built from CLI flags or from a plain mapping
    with ``CompileOptions.model_validate``.
    """
    src: Path
    dest: Path
    version: str
    minify: bool = False
    recursive: bool = False
    # -1 表示不限制行长度
    line_break: int = -1
    # 原始的作用域名称，在编译器内部解析，以便未知名称成为配置错误
    scope: Optional[str] = None


class ExtensionReport(BaseModel):
    extension: CompileExtension
    files_combined: int = 0
    minified: bool = False
    output_path: Optional[Path] = None
    diagnostics: List[Diagnostic] = Field(default_factory=list)
    error: Optional[str] = None


class CompileReport(BaseModel):
    files_discovered: int = 0
    extensions: List[ExtensionReport] = Field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and all(r.error is None for r in self.extensions)

    def for_extension(self, extension: CompileExtension) -> Optional[ExtensionReport]:
        for report in self.extensions:
            if report.extension is extension:
                return report
        return None


# --- 4. 服务接口 ---

class CompressorInterface(ABC):
    """An external minifier for one kind of asset."""

    @abstractmethod
    def compress(self, text: str, max_line_length: int = -1) -> CompressionResult:
        """
        Returns the minified text. A negative max_line_length means lines are
        never broken. Raises CompressorError when the text cannot be minified.
        """
        raise NotImplementedError
