"""
Pyroclastic Package
===================

Falling-rock tower simulation for a narrow chamber buffeted by jets of gas.

- tower_core: rock shapes, jet parsing, chamber physics, surface contour
  fingerprinting, cycle detection and the simulation driver
- evaluation: command line entry point that loads a jet pattern file and
  reports tower heights

All tunable constants live in tower_config.yaml.
"""
