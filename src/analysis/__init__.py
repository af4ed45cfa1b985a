"""
Analysis layer
--------------

Model passes over the curated dataset and the CSV artefacts built from them:

- model_summary.csv
- simulated_r_squared.csv
- simulation_summary.csv
"""

from .sanitation_income_models import (  # noqa: F401
    ANALYSIS_OUTPUT_PREFIX,
    MODEL_SUMMARY_CSV_NAME,
    SIMULATED_R_SQUARED_CSV_NAME,
    SIMULATION_SUMMARY_CSV_NAME,
    ModelPass,
    SanitationIncomeAnalysis,
    build_model_summary,
    build_simulated_r_squared_table,
    build_simulation_summary,
    run_sanitation_income_analysis,
    save_analysis_outputs,
)

__all__ = [
    "ANALYSIS_OUTPUT_PREFIX",
    "MODEL_SUMMARY_CSV_NAME",
    "SIMULATED_R_SQUARED_CSV_NAME",
    "SIMULATION_SUMMARY_CSV_NAME",
    "ModelPass",
    "SanitationIncomeAnalysis",
    "run_sanitation_income_analysis",
    "build_model_summary",
    "build_simulated_r_squared_table",
    "build_simulation_summary",
    "save_analysis_outputs",
]
