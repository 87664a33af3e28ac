#!/usr/bin/env python3
"""
Minify class names of a compiled wxml/wxss project in place.

This is a thin wrapper around minify_tools/minify_page.py so you can run:

  python minify_pages.py --dist-dir dist

Flags pass-through to the underlying tool:
  --pages-dir DIR          Pages directory under --dist-dir (default pages)
  --app-css FILE           Global stylesheet under --dist-dir (default app.wxss)
  --keep-class NAME        Never rename NAME (repeatable; also KEEP_CLASS_NAMES in .env)
  --class-names-json PATH  JSON list/object of names to keep
  --dry-run                Report renames only
  --backup                 Create .minify.bak before overwriting
  --report                 Write class_map_report.json
"""

import sys
import os


def main():
    # Ensure repo root is on sys.path so we can import minify_tools.*
    repo_root = os.path.dirname(os.path.abspath(__file__))
    sys.path.insert(0, repo_root)
    from minify_tools.minify_page import main as tool_main  # type: ignore
    tool_main()


if __name__ == "__main__":
    main()
