"""
Run Package

Configuration, evolution sessions and simulated runs.
Import the modules directly (voxbreed.run.config, voxbreed.run.session, voxbreed.run.simulate).
"""
