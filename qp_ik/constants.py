"""Constants used throughout the IK solver."""

# Task priorities supported by the solver
HARD_PRIORITY = 0
SOFT_PRIORITY = 1
SUPPORTED_PRIORITIES = (HARD_PRIORITY, SOFT_PRIORITY)

# Configuration keys
PRIMARY_VARIABLE_KEY = "primary_variable_name"
PRIMARY_VARIABLE_ALIASES = ("robot_velocity_variable_name",)
VERBOSITY_KEY = "verbosity"

# Default solver parameters
DEFAULT_VERBOSITY = False
DEFAULT_TOLERANCE = 1e-6

# QP solver settings
DEFAULT_QP_SOLVER = "osqp"
QP_EPS_ABS = 1e-6
QP_EPS_REL = 1e-6
