"""NNA Registry: taxonomy resolution and dual addressing for digital assets.

Every asset carries a Human-Friendly Name (``S.POP.HPM.003``) and a
Machine-Friendly Address (``2.001.007.003``) derived from the same
taxonomy path.
"""
