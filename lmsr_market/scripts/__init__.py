"""Initialization for the scripts package.

This module exports utilities from the scripts submodules for easy import.
"""

from .export_csv import *
from .generate_graph import *
from .run_demo import *
