"""
Readiness Engine — Configuration
Paths, solver settings, and analysis defaults.
"""
import math
from pathlib import Path

# ── Base paths ──────────────────────────────────────────────────
BASE_DIR = Path(__file__).resolve().parent.parent
OUTPUT_DIR = BASE_DIR / "readiness_engine" / "output_data"
FIGDATA_DIR = OUTPUT_DIR / "figdata"
STABILITY_JSON = OUTPUT_DIR / "stability_summary.json"

# ── Time axis ───────────────────────────────────────────────────
# The integrator runs in days; schedules and the bedtime kernel are given in hours.
HOURS_PER_DAY = 24.0
DAYS_PER_WEEK = 7.0

# ── ODE solver (Dormand–Prince 5(4)) ───────────────────────────
SOLVER_RTOL = 1e-6
SOLVER_ATOL = 1e-6
MAX_SOLVER_STEPS = 1_000_000   # accepted steps before IntegrationFailure
MAX_STEP_DAYS = 1.0 / 96.0     # 15 min; shorter than the shortest session pulse

# ── Simulation defaults ────────────────────────────────────────
DEFAULT_HORIZON_DAYS = 42.0
DEFAULT_OUTPUT_STEP_DAYS = 1.0 / 24.0   # hourly
DEFAULT_I_THRESHOLD = 0.8               # damage level counted as "high risk"

# ── Bedtime kernel ─────────────────────────────────────────────
# Right-endpoint Riemann nodes per 6 h of look-back horizon (15 min spacing).
KERNEL_SUBDIVISIONS = 24
KERNEL_REFERENCE_HOURS = 6.0

# ── Stationary / periodic analysis ─────────────────────────────
PERIOD_DAYS = DAYS_PER_WEEK
AVERAGING_STEP_DAYS = 1.0 / 96.0
WARMUP_PERIODS = 6
FLOQUET_EPSILON = 1e-6         # fixed forward-difference step, every coordinate
JACOBIAN_STEP = 1e-6           # central-difference step for the surrogate Jacobian

# ── Root finding ───────────────────────────────────────────────
EQUILIBRIUM_FTOL = 1e-10       # max |f(z*)| per component
FIXED_POINT_FTOL = 1e-8        # max |Φ_T(z*) - z*| per component
ROOT_XTOL = 1e-12
MAX_ROOT_EVALUATIONS = 400

# ── Stability summary ──────────────────────────────────────────
LN2 = math.log(2.0)

# ── ASCII plotting ─────────────────────────────────────────────
PLOT_WIDTH = 100
PLOT_HEIGHT = 12
MIN_PLOT_SPAN = 2.220446049250313e-16   # float64 machine epsilon
