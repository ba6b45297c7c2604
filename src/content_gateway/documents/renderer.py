"""
Renders records into the intermediate HTML markup.

Every format converter consumes this markup, which keeps record formatting
independent from output-format specifics.
"""

from pathlib import Path
from typing import Optional, Sequence

import structlog
from jinja2 import Environment, FileSystemLoader

from content_gateway.models.records import Record

logger = structlog.get_logger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates"


class DocumentRenderer:
    """
    Fixed-template renderer: a title heading, then one section per record.

    Attributes:
        title: Document title (heading and <title>)
        template_name: Jinja2 template file inside the templates directory
    """

    def __init__(
        self,
        title: str = "Posts",
        templates_dir: Optional[Path] = None,
        template_name: str = "records.html.j2",
    ):
        self.title = title
        self.template_name = template_name
        self.jinja_env = Environment(
            loader=FileSystemLoader(str(templates_dir or TEMPLATES_DIR)),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        self.template = self.jinja_env.get_template(template_name)

    def render(self, records: Sequence[Record]) -> str:
        """
        Render records in the given order.

        Titles and bodies are HTML-escaped; missing values render as
        "Untitled" / "No content".
        """
        logger.info("Rendering records to HTML", records=len(records))
        return self.template.render(title=self.title, records=records)
