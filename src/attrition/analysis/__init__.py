from .eda import CategoryRate, ClassBalance, EdaReport, category_rates, class_balance, run_eda, top_correlations

__all__ = [
    "CategoryRate",
    "ClassBalance",
    "EdaReport",
    "category_rates",
    "class_balance",
    "run_eda",
    "top_correlations",
]
