# -*- coding: utf-8 -*-
"""REST API for the Carbon Accounting service."""

from bluecarbon.carbon_accounting.api.router import router

__all__ = ["router"]
