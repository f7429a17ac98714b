"""
pddl_planner - run PDDL problems on external planners and collect their plans.
"""

__version__ = "1.0.0"
