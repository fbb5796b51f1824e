# -*- coding: utf-8 -*-
"""fittrack — fitness tracker backend with generated weekly diet plans."""

__version__ = "1.0.0"
