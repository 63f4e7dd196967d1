"""Top-level package for BalanceBeam.

BalanceBeam is a personal budgeting app: you list income and expense
items, watch the totals and a chart update as you go, and save, export
or share the result. The primary modules are:

* ``models`` – budget items, snapshots and their validation rules
* ``csv_import`` – all-or-nothing parsing of ``category,amount,type`` CSV
* ``aggregation`` – income, expense, net and savings-goal totals
* ``favorites`` – saved budgets and display preferences
* ``export`` – JSON, PDF and share-link exports
* ``dashboard`` – a Streamlit app that ties everything together

To run the dashboard from the command line you can execute:

```bash
streamlit run balancebeam/dashboard.py
```

or use ``run_dashboard.py`` in the project root.
"""

from . import aggregation  # noqa: F401  # re-exported for convenience
from . import csv_import  # noqa: F401  # re-exported for convenience
from . import export  # noqa: F401  # re-exported for convenience
from . import favorites  # noqa: F401  # re-exported for convenience
from . import models  # noqa: F401  # re-exported for convenience
from . import visualization  # noqa: F401  # re-exported for convenience
# Streamlit may not be installed in every environment (e.g. a minimal
# test install), so the dashboard is optional at import time.
try:
    from . import dashboard  # type: ignore  # noqa: F401
except ModuleNotFoundError:
    dashboard = None  # type: ignore


__all__ = ["aggregation", "csv_import", "export", "favorites", "models", "visualization", "dashboard"]
