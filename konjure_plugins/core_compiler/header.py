# konjure_plugins/core_compiler/header.py
import os
from datetime import datetime
from typing import Optional

import jinja2

from .contracts import CompileExtension

PROJECT_URL = "https://konjure.org/ui"
LICENSE_URL = "https://opensource.org/licenses/MIT"

HEADER_LINES = [
    "/*",
    "",
    "\t* Konjure UI {{ library }} Library v{{ version }}",
    "\t* {{ project_url }}",
    "",
    "\t* Copyright (c) {{ year }} Konjure and other contributors",
    "\t* Released under the MIT license",
    "\t* {{ license_url }}",
    "",
    "*/",
]

_env = jinja2.Environment(undefined=jinja2.StrictUndefined, autoescape=False)
_template = _env.from_string("\n".join(HEADER_LINES))


def build_header(extension: CompileExtension, version: str, now: Optional[datetime] = None) -> str:
    """Renders the license banner prepended to every compiled artifact."""
    now = now or datetime.now()
    rendered = _template.render(
        library=str(extension),
        version=version,
        project_url=PROJECT_URL,
        year=now.year,
        license_url=LICENSE_URL,
    )
    return os.linesep.join(rendered.split("\n"))
