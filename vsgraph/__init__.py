"""
vsgraph: node graph to VapourSynth script compiler.
"""

__version__ = "0.1.0"
