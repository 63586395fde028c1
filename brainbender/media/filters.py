"""
brainbender/media/filters.py – Typed ffmpeg filter-graph builder
=================================================================
ffmpeg reads a ``-vf`` argument through two tokenizer passes:

  1. graph level   – the filter list is split on ``[ ] , ;``; ``\\`` escapes
                     the next character and ``'...'`` quotes a run.
  2. option level  – each filter's arguments are split on ``:``; the same
                     ``\\`` and ``'`` rules apply again.

Values are therefore escaped option-level first, then the whole argument
string graph-level. ``Filter`` applies both to every value it renders, so no
caller ever concatenates raw text into the graph.

Both passes also trim surrounding whitespace from each token, so caption text
is stripped before it is escaped.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

OPTION_SPECIAL = "\\':"
GRAPH_SPECIAL = "\\'[],;"


def _escape(text: str, special: str) -> str:
    return "".join(f"\\{ch}" if ch in special else ch for ch in text)


def escape_option_value(text: str) -> str:
    return _escape(text, OPTION_SPECIAL)


def escape_filter_args(text: str) -> str:
    return _escape(text, GRAPH_SPECIAL)


def _fmt_seconds(x: float) -> str:
    return f"{x:.3f}"


@dataclass(frozen=True)
class Filter:
    name: str
    options: tuple[tuple[str, str], ...] = ()

    def render(self) -> str:
        if not self.options:
            return self.name
        args = ":".join(f"{k}={escape_option_value(v)}" for k, v in self.options)
        return f"{self.name}={escape_filter_args(args)}"


@dataclass
class FilterChain:
    filters: list[Filter] = field(default_factory=list)

    def add(self, name: str, **options: object) -> "FilterChain":
        self.filters.append(Filter(name, tuple((k, str(v)) for k, v in options.items())))
        return self

    def extend(self, filters: list[Filter]) -> "FilterChain":
        self.filters.extend(filters)
        return self

    def render(self) -> str:
        return ",".join(f.render() for f in self.filters)

    def __str__(self) -> str:
        return self.render()


@dataclass(frozen=True)
class Caption:
    text: str
    start: float
    end: float
    font_size: int
    color: str = "white"
    y: str = "(h-text_h)/2"
    box: bool = False

    def to_filter(self, font_file: Path) -> Filter:
        opts: list[tuple[str, str]] = [
            ("fontfile", str(font_file)),
            ("expansion", "none"),
            ("text", self.text.strip()),
            ("fontsize", str(self.font_size)),
            ("fontcolor", self.color),
            ("x", "(w-text_w)/2"),
            ("y", self.y),
            ("line_spacing", "12"),
            ("borderw", "4"),
            ("bordercolor", "black"),
        ]
        if self.box:
            opts += [("box", "1"), ("boxcolor", "black@0.55"), ("boxborderw", "24")]
        opts.append(("enable", f"between(t,{_fmt_seconds(self.start)},{_fmt_seconds(self.end)})"))
        return Filter("drawtext", tuple(opts))
