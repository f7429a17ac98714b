"""
Planner plugins package - auto-discovered by the registry.

To add a new planner, create a new Python file in this directory
(e.g. ``my_planner.py``) and define a class that inherits from
``PlannerPlugin``.  Expose an instance as the module-level ``plugin``
attribute and it will be picked up on next startup.

Planners that only need a command template can instead be declared in
the YAML planner configuration (see ``pddl_planner.planners.configured``).
"""
