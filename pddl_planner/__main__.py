from pddl_planner.cli import run

run()
