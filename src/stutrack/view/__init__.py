"""Textual screens and widgets."""

import pathlib


CSS_FOLDER = pathlib.Path(__file__).parent.parent / "styles"
