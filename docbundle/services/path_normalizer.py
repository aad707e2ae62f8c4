"""Path normalization for matching symbol URLs against catalog files.

``language-reference-guide/docs/symbols/iota.md`` is published as
``language-reference-guide/symbols/iota``; the normalized form drops the
document-root segments, the extension and a trailing ``index`` page.
"""

DEFAULT_DOCS_DIR = "docs"
DEFAULT_EXTENSION = ".md"
INDEX_PAGE = "index"


def normalize_file_path(
    file: str,
    docs_dir: str = DEFAULT_DOCS_DIR,
    extension: str = DEFAULT_EXTENSION,
) -> str:
    """Map a tree-relative document path to its published URL path.

    Examples:
        site/docs/symbols/iota.md -> site/symbols/iota
        site/docs/foo/index.md    -> site/foo
        docs/index.md             -> "" (the root index)
    """
    path = file.replace("\\", "/")
    # Sub-sites keep their pages under <site>/docs/
    path = path.replace(f"/{docs_dir}/", "/")
    if path.startswith(f"{docs_dir}/"):
        path = path[len(docs_dir) + 1:]
    if extension and path.endswith(extension):
        path = path[:-len(extension)]
    if path.endswith(f"/{INDEX_PAGE}"):
        path = path[:-len(INDEX_PAGE) - 1]
    elif path == INDEX_PAGE:
        path = ""
    return path
