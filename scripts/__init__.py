"""
Package marker for scripts to allow running as a module:

    python3 -m scripts.run_layer_model

This avoids import issues for 'pygreenhouse'.
"""
