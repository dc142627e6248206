# Sphinx configuration for the lawflow API reference

import os
import sys

sys.path.insert(0, os.path.abspath('../src'))

from lawflow import __version__  # noqa: E402

project = 'lawflow'
copyright = '2024, lawflow contributors'
author = 'lawflow contributors'
version = __version__
release = __version__

extensions = [
    'sphinx.ext.autodoc',
    'sphinx.ext.napoleon',
    'sphinx.ext.viewcode',
    'sphinx.ext.intersphinx',
    'sphinx_autodoc_typehints',
]

exclude_patterns = ['_build']

html_theme = 'sphinx_rtd_theme'

# Workflow models are pydantic; their generated validators are noise in the reference.
autodoc_default_options = {
    'members': True,
    'member-order': 'bysource',
    'exclude-members': 'model_config, model_fields, model_computed_fields',
}
autodoc_typehints = 'description'

# Google-style docstrings only
napoleon_google_docstring = True
napoleon_numpy_docstring = False

intersphinx_mapping = {
    'python': ('https://docs.python.org/3', None),
    'pydantic': ('https://docs.pydantic.dev/latest', None),
}
