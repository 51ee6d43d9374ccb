"""
llms.txt rendering.

The index is rebuilt from scratch every run:

    # <project name>
    > <project summary>

    ## Documentation
    - [slug](/llms/slug.html.md): description
"""

from pathlib import Path, PurePosixPath
from typing import Iterable

from .config import LLMScanConfig
from .exceptions import OutputError
from .freshness_cache import MARKDOWN_SUFFIX
from .schemas import IndexEntry
from .logger import get_module_logger

logger = get_module_logger("index_writer")

INDEX_FILENAME = "llms.txt"
EMPTY_INDEX_LINE = "No technical documentation pages found."


class IndexWriter:
    """Renders IndexEntry lists into llms.txt at the web root."""

    def __init__(self, config: LLMScanConfig):
        self.config = config

    @property
    def index_path(self) -> Path:
        return self.config.web_root / INDEX_FILENAME

    def public_path(self) -> str:
        """
        URL path of the output directory as served from the web root.

        /var/www/site/llms under /var/www/site → "/llms"
        the web root itself                   → ""
        outside the web root                  → "/" + directory name
        """
        output_dir = PurePosixPath(self.config.llms_output_dir.as_posix())
        web_root = PurePosixPath(self.config.web_root.as_posix())

        if output_dir.is_relative_to(web_root):
            rel = output_dir.relative_to(web_root).as_posix()
            return "" if rel == "." else "/" + rel
        return "/" + output_dir.name

    def link(self, slug: str) -> str:
        path = f"{self.public_path()}/{slug}{MARKDOWN_SUFFIX}"
        if self.config.use_absolute_urls:
            return self.config.site_url + path
        return path

    def render(self, entries: Iterable[IndexEntry]) -> str:
        entries = list(entries)
        lines = [
            f"# {self.config.project_name}",
            f"> {self.config.project_summary}",
            "",
        ]

        if entries:
            lines.append("## Documentation")
            lines.extend(f"- [{e.slug}]({self.link(e.slug)}): {e.description}" for e in entries)
        else:
            lines.append(EMPTY_INDEX_LINE)

        return "\n".join(lines) + "\n"

    def write(self, entries: Iterable[IndexEntry]) -> Path:
        """
        Render and overwrite llms.txt.

        Raises:
            OutputError: if the file cannot be written
        """
        path = self.index_path
        try:
            path.write_text(self.render(entries), encoding="utf-8")
        except OSError as e:
            raise OutputError(f"Cannot write {path}", details={"error": str(e)})

        logger.info(f"llms.txt generated at {path}")
        return path
