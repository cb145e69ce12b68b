"""Top-level package for the budget dashboard.

Household budget-vs-actual tracking.  The primary modules are:

* ``service`` – monthly and yearly summaries for a profile
* ``budgets`` – the pure aggregation code behind those summaries
* ``db`` – the SQLite ledger store (profiles, budget lines, transactions)
* ``ingest`` – import of categorized transaction files
* ``visualization`` – functions that generate Plotly figures
* ``dashboard`` – the Streamlit app that ties everything together

To run the dashboard from the command line you can execute:

```bash
python run_dashboard.py
```
"""

from . import service  # noqa: F401  # re-exported for convenience
from . import visualization  # noqa: F401  # re-exported for convenience
from .models import ProfileNotFoundError  # noqa: F401
from .service import get_monthly_summary, get_yearly_summary  # noqa: F401

__all__ = [
    "service",
    "visualization",
    "ProfileNotFoundError",
    "get_monthly_summary",
    "get_yearly_summary",
]
