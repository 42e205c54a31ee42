"""Top-level compiler orchestration."""

from __future__ import annotations
import logging
import sys
from pathlib import Path
from typing import TextIO

from mooc.parser.tree_builder import parse_moo
from mooc.analysis.errors import ErrorReporter
from mooc.analysis.name_analyzer import name_analysis, NameAnalysisResult
from mooc.unparse.unparser import unparse

logger = logging.getLogger(__name__)


def analyze_source(source: str, reporter: ErrorReporter | None = None) -> NameAnalysisResult:
    """Parse `source` and run name analysis over it."""
    program = parse_moo(source)
    logger.debug("parsed %d top-level declaration(s)", len(program.decls))
    return name_analysis(program, reporter)


def compile_file(
    input_path: Path,
    output_path: Path | None = None,
    annotate: bool = True,
    dump_ast: bool = False,
    dump_symbols: bool = False,
    stream: TextIO | None = None,
) -> NameAnalysisResult:
    """Analyze a .moo file.

    Semantic errors are written to `stream` (stderr by default) as they are
    found. When the program is error free it is unparsed to `output_path`,
    or to stdout when no path is given.
    """
    err_stream = stream if stream is not None else sys.stderr
    source = Path(input_path).read_text(encoding="utf-8")
    result = analyze_source(source, ErrorReporter(err_stream))

    if dump_ast:
        _dump_ast(result.program)
    if dump_symbols:
        print(result.globals.dump())

    if not result.ok:
        logger.debug("%s: %d semantic error(s), skipping output", input_path, len(result.errors))
        return result

    text = unparse(result.program, annotate=annotate)
    if output_path is None:
        sys.stdout.write(text)
    else:
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(text, encoding="utf-8")
        print(f"Wrote {output_path}")
    return result


def _dump_ast(program):
    import dataclasses, json

    def _ser(obj):
        if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
            d = {"_type": type(obj).__name__}
            for f in dataclasses.fields(obj):
                if f.name == "symbol":
                    continue
                d[f.name] = _ser(getattr(obj, f.name))
            return d
        if isinstance(obj, list):
            return [_ser(x) for x in obj]
        return obj

    print(json.dumps(_ser(program), indent=2, default=str))
