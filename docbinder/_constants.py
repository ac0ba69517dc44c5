"""Common literal values used across docbinder.

These constants keep filenames, anchor prefixes, and option values centralized
so sinks, generators, and tests can import the same values without drifting.
Intended for internal use within the docbinder package.

Examples
--------
>>> from docbinder import _constants
>>> _constants.SECTION_ANCHOR_TEMPLATE.format(index=3)
'section-3'
>>> _constants.TOC_START
'start'
"""

SECTION_ANCHOR_TEMPLATE = "section-{index}"
DOCUMENT_ID_PREFIX = "./"

TOC_START = "start"
TOC_END = "end"
TOC_NONE = "none"
DEFAULT_TOC_POSITION = TOC_START
MAX_TOC_LEVEL = 4

DEFAULT_OUTPUT_NAME = "target"
DEFAULT_PYGMENTS_STYLE = "default"
PAGE_CONFIG_FILENAME = "page-config.yaml"
TEMPLATE_SUFFIX = ".jinja"

LANG_DIRECTIVE = "@lang"
MARKUP_LANGUAGE = "xml"
DEFAULT_LANGUAGE = "java"
