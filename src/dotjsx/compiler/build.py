"""Batch compilation of template directories."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from dotjsx.compiler.codegen.generator import CodeGenerator
from dotjsx.compiler.exceptions import DotJsxError
from dotjsx.compiler.parser import DotParser
from dotjsx.config import CompilerConfig

log = logging.getLogger(__name__)


@dataclass
class BuildSummary:
    out_dir: Path
    compiled: List[Path] = field(default_factory=list)
    failed: Dict[Path, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed


def build_templates(
    src_dir: Path,
    out_dir: Optional[Path] = None,
    pattern: str = "*.dot",
    config: Optional[CompilerConfig] = None,
) -> BuildSummary:
    """Compile every template under src_dir into a .tsx file in out_dir.

    The directory layout below src_dir is mirrored. A template that fails
    to compile is recorded in the summary and does not stop the build.
    """
    if not src_dir.is_dir():
        raise FileNotFoundError(f"Template directory not found: {src_dir}")
    if out_dir is None:
        out_dir = src_dir

    parser = DotParser()
    generator = CodeGenerator(config)
    summary = BuildSummary(out_dir=out_dir)

    for template_path in sorted(src_dir.rglob(pattern)):
        if not template_path.is_file():
            continue

        target = out_dir / template_path.relative_to(src_dir).with_suffix(".tsx")
        try:
            document = parser.parse_file(template_path)
            module = generator.generate(document, str(template_path))
        except DotJsxError as e:
            log.warning("Failed to compile %s: %s", template_path, e.message)
            summary.failed[template_path] = str(e)
            continue

        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(module.to_source() + "\n", encoding="utf-8")
        log.info("Compiled %s -> %s", template_path, target)
        summary.compiled.append(target)

    return summary
