APP_NAME = "Budget Ledger"
DB_FILE = "budget.db"
SCHEMA_VERSION = 1
EXPORT_VERSION = 1

DATE_FORMAT = "%Y-%m-%d"
MONTH_FORMAT = "%Y-%m"

TRANSACTION_TYPES = ("income", "expense", "savings")

FREQUENCIES = ("none", "weekly", "biweekly", "semimonthly", "monthly", "yearly")

# Fixed-day steps used by the expander
DAY_STEPS = {
    "weekly": 7,
    "biweekly": 14,
    "semimonthly": 15,
}

# Nominal day interval used when a series' step cannot be inferred from its dates
NOMINAL_INTERVAL_DAYS = {
    "weekly": 7,
    "biweekly": 14,
    "semimonthly": 15,
    "monthly": 30,
    "yearly": 365,
}

WEEKDAY_FREQUENCIES = ("weekly", "biweekly")

OPEN_ENDED_OCCURRENCE_CAP = 24
MAX_SERIES_OCCURRENCES = 200
SERIES_EDIT_CAP = 100

DEFAULT_CATEGORIES = [
    {"name": "Salary",        "type": "income",  "color_hex": "#4CAF50", "is_system": 1},
    {"name": "Dividends",     "type": "income",  "color_hex": "#8BC34A", "is_system": 1},
    {"name": "Groceries",     "type": "expense", "color_hex": "#FF9800", "is_system": 1},
    {"name": "Housing",       "type": "expense", "color_hex": "#F44336", "is_system": 1},
    {"name": "Transport",     "type": "expense", "color_hex": "#2196F3", "is_system": 1},
    {"name": "Leisure",       "type": "expense", "color_hex": "#FF5722", "is_system": 1},
    {"name": "Emergency Fund", "type": "savings", "color_hex": "#009688", "is_system": 1},
    {"name": "Retirement",    "type": "savings", "color_hex": "#3F51B5", "is_system": 1},
    {"name": "Other",         "type": "expense", "color_hex": "#888888", "is_system": 1},
]

CHART_COLORS = {
    "income":  "#4CAF50",
    "expense": "#F44336",
    "savings": "#009688",
    "net":     "#2196F3",
}
