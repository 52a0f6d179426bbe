#!/usr/bin/env python3
"""Check for banned Python constructions in gx source.

Banned constructions:

    Construction          Reason                            Use instead
    --------------------  --------------------------------  --------------------------
    import subprocess     handlers must stay side-effect    ctx.repo_url() via
    from subprocess ...   free; git is the only process     gx/core/git.py
    import webbrowser     opening is the host's decision    the opener passed to
    from webbrowser ...                                     browse()/act()
"""

import ast
import os
import sys

# Module -> files allowed to import it (paths relative to the source root)
BANNED_MODULES = {
    "subprocess": frozenset({os.path.join("gx", "core", "git.py")}),
    "webbrowser": frozenset({os.path.join("gx", "gx.py")}),
}

HINTS = {
    "subprocess": "use GitRemotes in gx/core/git.py",
    "webbrowser": "take an opener callback",
}


def find_python_files(directory):
    """Find all .py files recursively."""
    result = []
    for root, dirs, files in os.walk(directory):
        if "__pycache__" in dirs:
            dirs.remove("__pycache__")
        for f in files:
            if f.endswith(".py"):
                result.append(os.path.join(root, f))
    result.sort()
    return result


def _is_allowed(module, relpath):
    return relpath in BANNED_MODULES[module]


def check_file(filepath, src_dir="src"):
    with open(filepath) as f:
        source = f.read()

    tree = ast.parse(source, filepath)
    relpath = os.path.relpath(filepath, src_dir)
    errors = []

    for node in ast.walk(tree):
        lineno = getattr(node, "lineno", 0)

        # import subprocess
        if isinstance(node, ast.Import):
            for alias in node.names:
                top = alias.name.split(".")[0]
                if top in BANNED_MODULES and not _is_allowed(top, relpath):
                    errors.append((lineno, f"import {alias.name}: banned, {HINTS[top]}"))

        # from subprocess import ...
        if isinstance(node, ast.ImportFrom) and node.module:
            top = node.module.split(".")[0]
            if top in BANNED_MODULES and not _is_allowed(top, relpath):
                errors.append((lineno, f"from {node.module} import: banned, {HINTS[top]}"))

    return errors


def main():
    src_dir = "src"
    if len(sys.argv) > 1:
        src_dir = sys.argv[1]

    if not os.path.isdir(src_dir):
        print(f"Directory not found: {src_dir}")
        sys.exit(1)

    files = find_python_files(src_dir)
    if not files:
        print(f"No Python files found in: {src_dir}")
        sys.exit(1)

    all_errors = []
    for filepath in files:
        try:
            errors = check_file(filepath, src_dir)
            for lineno, description in errors:
                all_errors.append((filepath, lineno, description))
        except SyntaxError as e:
            print(f"Syntax error in {filepath}: {e}")
            sys.exit(1)

    if not all_errors:
        sys.exit(0)

    print(f"Found {len(all_errors)} banned construction(s):")
    for filepath, lineno, description in sorted(all_errors):
        print(f"  {filepath}:{lineno}: {description}")
    sys.exit(1)


if __name__ == "__main__":
    main()
