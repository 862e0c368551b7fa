"""
Shared test setup.
"""

import os

# Must be set before any po_reconciliation module reads its config
os.environ["ENV"] = "test"
