"""
BlueCarbon: Carbon Accounting Infrastructure for Blue-Carbon MRV
================================================================

Measurement, Reporting and Verification (MRV) building blocks for
mangrove, seagrass and salt-marsh restoration projects.

Packages:
    - carbon_accounting: biomass/carbon estimation, plot geometry, field
      data validation, CSV export and the service facade
    - exceptions: shared exception hierarchy
"""

from ._version import __version__

__author__ = "BlueCarbon Team"
__license__ = "MIT"

__all__ = [
    "__version__",
]
