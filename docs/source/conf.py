# Sphinx configuration for the chisel API docs.

import os
import sys

sys.path.insert(0, os.path.abspath("../.."))

project = "chisel"
author = "chisel contributors"

extensions = [
    "sphinx.ext.autodoc",
    "sphinx.ext.napoleon",
    "sphinxcontrib.mermaid",
    "sphinx_immaterial",
]

html_theme = "sphinx_immaterial"

# Google style docstrings throughout chisel
napoleon_google_docstring = True
napoleon_numpy_docstring = False

autodoc_default_options = {
    "members": True,
    "member-order": "bysource",
}
autodoc_typehints = "description"
