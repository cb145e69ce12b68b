"""Default profiles and budget lines loaded into an empty database."""

from __future__ import annotations

from typing import List, Tuple

DEFAULT_PROFILES: List[Tuple[str, str, str]] = [
    ("diego", "Diego", "Personal finances"),
    ("marta", "Marta", "Personal finances"),
    ("casa", "Casa", "Joint household (Diego & Marta)"),
]

# (profile_id, budget_group, line_name, monthly_amount, annual_amount, is_annual)
DEFAULT_BUDGET_LINES: List[Tuple[str, str, str, float, float, bool]] = [
    # Diego - Fixed Costs
    ("diego", "Fixed Costs", "Rent / Mortgage", 1000, 12000, False),
    ("diego", "Fixed Costs", "Utilities", 30, 360, False),
    ("diego", "Fixed Costs", "Subscriptions", 60, 720, False),
    ("diego", "Fixed Costs", "Seguro coche", 60, 720, True),
    ("diego", "Fixed Costs", "Seguro moto", 30, 360, True),
    ("diego", "Fixed Costs", "Garajes", 170, 2040, False),
    ("diego", "Fixed Costs", "Transportation", 50, 600, False),
    ("diego", "Fixed Costs", "Mant. vehículos", 100, 1200, False),
    ("diego", "Fixed Costs", "BMW", 360, 4320, False),
    ("diego", "Fixed Costs", "Psicóloga", 60, 720, False),
    ("diego", "Fixed Costs", "Médicos", 50, 600, False),
    ("diego", "Fixed Costs", "Miscellaneous", 295.50, 3546, False),
    # Diego - Investments
    ("diego", "Investments", "Stocks", 500, 6000, False),
    # Diego - Savings Goals
    ("diego", "Savings Goals", "Vacations", 450, 5400, False),
    ("diego", "Savings Goals", "Gifts", 125, 1500, False),
    ("diego", "Savings Goals", "Emergency fund", 400, 4800, False),
    # Diego - Guilt-Free
    ("diego", "Guilt-Free", "Guilt-Free Spending", 776.41, 9316.92, False),
    # Diego - Pre-Tax
    ("diego", "Pre-Tax", "Cuota Autónomos", 458.09, 5497.08, False),
    # Casa
    ("casa", "Fixed Costs", "Rent / Mortgage", 1000, 12000, False),
    ("casa", "Fixed Costs", "Groceries", 450, 5400, False),
    ("casa", "Fixed Costs", "Miscellaneous", 217.50, 2610, False),
    ("casa", "Investments", "Revolut Conjunta Ahorro", 300, 3600, False),
    ("casa", "Savings Goals", "Vacations", 400, 4800, False),
    ("casa", "Guilt-Free", "Guilt-Free Spending", 32.50, 390, False),
    # Marta
    ("marta", "Fixed Costs", "Rent / Mortgage", 1000, 12000, False),
    ("marta", "Fixed Costs", "Utilities", 30, 360, False),
    ("marta", "Fixed Costs", "Subscriptions", 60, 720, False),
    ("marta", "Fixed Costs", "Transportation", 50, 600, False),
    ("marta", "Fixed Costs", "Psicóloga", 60, 720, False),
    ("marta", "Fixed Costs", "Médicos", 50, 600, False),
    ("marta", "Fixed Costs", "Miscellaneous", 200, 2400, False),
    ("marta", "Investments", "Savings", 500, 6000, False),
    ("marta", "Savings Goals", "Vacations", 400, 4800, False),
    ("marta", "Savings Goals", "Gifts", 125, 1500, False),
    ("marta", "Savings Goals", "Emergency fund", 300, 3600, False),
    ("marta", "Guilt-Free", "Guilt-Free Spending", 500, 6000, False),
]
